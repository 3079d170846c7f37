# compiletest

Pieces for driving a compiler test suite from Python: running the compiler
and test binaries with bounded output capture, matching diagnostics against
the ones a test expects, normalizing output for UI tests, building debugger
scripts, and checking MIR dumps, codegen-unit partitioning and doc-test line
numbers.

## Installation

```
pip install .
pip install ".[test]"   # with the test dependencies
```

## Modules

- `compiletest.process` — `run_abbreviated(args, input, env, cwd)` runs a
  command, feeds it `input`, and keeps only the head and tail of very large
  output (`ProcOutput`). It returns a `ProcRes` with `returncode`, `stdout`,
  `stderr`, `cmdline`, a `status` text, `success()` and `report(error)`, which
  prints the details and raises `TestFailure`. `dylib_env_var()` and
  `dylib_search_path()` build the library search path for a child.
- `compiletest.uidiff` — `diff_lines(actual, expected)` lists the lines that
  differ; `lines_match(expected, actual)` treats `[..]` as a wildcard.
- `compiletest.args` — building command lines and output paths:
  `split_maybe_args`, `cleanup_debug_info_options`, `has_custom_target`,
  `exe_name`, `output_base_name`, `aux_output_dir_name`, `aux_crate_type`
  and `make_run_args`.
- `compiletest.checks` — `get_output`, `missing_error_patterns`,
  `has_compiler_crash`, `forbidden_patterns_found` and
  `check_correct_failure_status`.
- `compiletest.debugger` — `parse_debugger_commands` reads
  `<prefix>-command` / `<prefix>-check` directives and `#break` lines into a
  `DebuggerCommands`; `check_single_line` and `first_missing_check_line`
  check debugger output, where `[...]` matches any text.
- `compiletest.scripts` — `gdb_script`, `lldb_script` and `gdb_charset`.
- `compiletest.expected_errors` — `match_expected_errors` pairs the expected
  `Diagnostic` values with those actually reported and returns an
  `ErrorMatch`; `describe_mismatches` turns it into messages.
- `compiletest.normalize` — `normalize_output`, `is_json_output`,
  `render_diff` and `compare_output`, with `bless` support.
- `compiletest.files` — `aggressive_rm_rf`, `delete_file`,
  `load_expected_output`, `is_newer`, and `record_missing_coverage` for a
  report file shared between threads.
- `compiletest.mir` — `parse_mir_expectations` reads `// START` / `// END`
  blocks into `ExpectedLine` lists; `compare_mir_output` checks a dump
  against them.
- `compiletest.codegen_units` — `compare_trans_items` compares `TRANS_ITEM`
  lines and returns a `CodegenReport`.
- `compiletest.rustdoc` — `doc_test_lines` and `check_doc_test_output`.

Failed checks raise `compiletest.process.TestFailure`.

## Example

```python
from compiletest.uidiff import diff_lines
from compiletest.checks import missing_error_patterns

print(diff_lines("error: oops\n", "error: [..]\n"))    # []
print(missing_error_patterns("a\nmeep\n", ["meep"]))  # []
```

## What it does not do

There is no command and no test runner here: the package does not discover
test files, read test headers, or decide which checks a test mode needs.
Nor does it know about target triples or operating-system names. It provides
the pieces such a runner is built from.

## Running the tests

```
pytest
```