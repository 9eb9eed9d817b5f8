from __future__ import annotations

import sys
from pathlib import Path

import pytest

from loxterp import Interpreter, LoxRuntimeError

EXPECTED_KITCHEN_OUTPUT = [
    "hello world",
    "55",
    "2",
    "10",
    "square with area 9",
    "fallback",
    "true",
]


def test_kitchen_sink_fixture_runs(run_lox):
    source = (Path(__file__).parent / "fixtures" / "kitchen_sink.lox").read_text()
    assert run_lox(source, filename="<kitchen_sink>") == EXPECTED_KITCHEN_OUTPUT


def test_recursive_factorial(run_lox):
    source = """
fun f(n) { if (n <= 1) return 1; return n * f(n - 1); }
print f(5);
"""
    assert run_lox(source) == ["120"]


def test_closure_outlives_defining_call(run_lox):
    source = """
fun outer() {
  var value = 1;
  fun inner() {
    value = value + 1;
    return value;
  }
  return inner;
}
var fn = outer();
print fn();
print fn();
"""
    assert run_lox(source) == ["2", "3"]


def test_each_call_gets_its_own_captured_environment(run_lox):
    source = """
fun makeCounter() {
  var i = 0;
  fun count() { i = i + 1; return i; }
  return count;
}
var a = makeCounter();
var b = makeCounter();
a(); a();
print a();
print b();
"""
    assert run_lox(source) == ["3", "1"]


def test_closure_capture_is_lexical_not_dynamic(run_lox):
    source = """
var a = "global";
{
  fun showA() { print a; }
  showA();
  var a = "block";
  showA();
}
"""
    assert run_lox(source) == ["global", "global"]


def test_shadowing_in_nested_blocks(run_lox):
    source = """
var a = "outer";
{
  var a = "middle";
  {
    var a = "inner";
    print a;
  }
  print a;
}
print a;
"""
    assert run_lox(source) == ["inner", "middle", "outer"]


def test_assignment_updates_enclosing_local(run_lox):
    source = """
{
  var x = 1;
  {
    x = 2;
  }
  print x;
}
"""
    assert run_lox(source) == ["2"]


def test_assignment_is_an_expression(run_lox):
    source = """
var a;
var b;
a = b = 3;
print a;
print b;
"""
    assert run_lox(source) == ["3", "3"]


def test_var_without_initializer_is_nil(run_lox):
    assert run_lox("var x; print x;") == ["nil"]


def test_globals_can_be_redeclared(run_lox):
    source = """
var a = 1;
var a = a + 1;
print a;
"""
    assert run_lox(source) == ["2"]


def test_globals_resolve_dynamically(run_lox):
    source = """
fun show() { print later; }
var later = "defined after the function";
show();
"""
    assert run_lox(source) == ["defined after the function"]


def test_string_and_number_concatenation(run_lox):
    source = """
print 1 + "a";
print "a" + 1;
print "a" + "b";
print "n=" + 2.5;
print "flag " + true;
print nil + "!";
"""
    assert run_lox(source) == ["1a", "a1", "ab", "n=2.5", "flag true", "nil!"]


def test_arithmetic_and_comparison(run_lox):
    source = """
print 1 + 2 * 3;
print (1 + 2) * 3;
print 7 / 2;
print -3 - -4;
print 2 >= 2;
print 1 < 0;
"""
    assert run_lox(source) == ["7", "9", "3.5", "1", "true", "false"]


def test_equality_rules(run_lox):
    source = """
print nil == nil;
print nil == false;
print 1 == "1";
print 0 == false;
print "a" == "a";
print 1 != 2;
print true != "true";
"""
    assert run_lox(source) == ["true", "false", "false", "false", "true", "true", "true"]


def test_truthiness(run_lox):
    source = """
if (0) print "zero is truthy";
if ("") print "empty string is truthy";
if (nil) print "unreachable"; else print "nil is falsy";
print !false;
print !0;
"""
    assert run_lox(source) == [
        "zero is truthy",
        "empty string is truthy",
        "nil is falsy",
        "true",
        "false",
    ]


def test_logical_operators_short_circuit_and_return_operands(run_lox):
    source = """
fun boom() { print "evaluated"; return true; }
print "left" or boom();
print nil and boom();
print nil or "right";
print 1 and "second";
"""
    assert run_lox(source) == ["left", "nil", "right", "second"]


def test_break_terminates_only_innermost_loop(run_lox):
    source = """
var outer = 0;
while (outer < 3) {
  var inner = 0;
  while (true) {
    inner = inner + 1;
    if (inner == 2) break;
  }
  print inner;
  outer = outer + 1;
}
print outer;
"""
    assert run_lox(source) == ["2", "2", "2", "3"]


def test_for_loop_desugars_with_scoped_initializer(run_lox):
    source = """
var i = "global i";
for (var i = 0; i < 3; i = i + 1) print i;
print i;
"""
    assert run_lox(source) == ["0", "1", "2", "global i"]


def test_return_from_inside_loop(run_lox):
    source = """
fun firstOver(limit) {
  var n = 0;
  while (true) {
    if (n > limit) return n;
    n = n + 1;
  }
}
print firstOver(4);
"""
    assert run_lox(source) == ["5"]


def test_bare_return_and_missing_return_yield_nil(run_lox):
    source = """
fun bare() { return; }
fun implicit() {}
fun explicit() { return nil; }
print bare();
print implicit();
print explicit();
print bare() == explicit();
"""
    assert run_lox(source) == ["nil", "nil", "nil", "true"]


def test_functions_are_first_class(run_lox):
    source = """
fun twice(f, x) { return f(f(x)); }
fun addOne(n) { return n + 1; }
print twice(addOne, 5);
print addOne;
print clock;
"""
    assert run_lox(source) == ["7", "<fn addOne>", "<native fn clock>"]


def test_callables_compare_by_identity(run_lox):
    source = """
fun f() {}
var g = f;
print f == g;
fun make() { fun inner() {} return inner; }
print make() == make();
"""
    assert run_lox(source) == ["true", "false"]


def test_block_restores_environment_after_runtime_error():
    lines: list[str] = []
    interpreter = Interpreter(output=lines.append)

    first = interpreter.run('var x = "global"; { var x = "local"; print missing; }')
    assert isinstance(first.exception, LoxRuntimeError)
    assert interpreter.environment is interpreter.globals

    second = interpreter.run("print x;")
    assert second.ok
    assert lines == ["global"]


def test_runtime_error_skips_later_top_level_statements(run_lox_result):
    result, lines = run_lox_result(
        """
print "before";
print 1 - "a";
print "after";
"""
    )
    assert isinstance(result.exception, LoxRuntimeError)
    assert lines == ["before"]


def test_effects_before_runtime_error_are_kept(run_lox_result):
    result, lines = run_lox_result(
        """
var log = "";
{
  print "inside";
  log = "changed";
  print nope;
}
"""
    )
    assert result.exception is not None
    assert lines == ["inside"]


def test_globals_persist_across_runs_of_one_interpreter():
    lines: list[str] = []
    interpreter = Interpreter(output=lines.append)
    assert interpreter.run("var count = 1;").ok
    assert interpreter.run("fun bump() { count = count + 1; }").ok
    assert interpreter.run("bump(); bump(); print count;").ok
    assert lines == ["3"]


def test_raise_for_exception_propagates_runtime_error(run_lox):
    with pytest.raises(LoxRuntimeError, match="Division by zero"):
        run_lox("print 1 / 0;")


def test_deep_recursion_runs_to_completion(run_lox):
    source = """
fun sum(n) {
  if (n <= 0) return 0;
  return n + sum(n - 1);
}
print sum(1000);
"""
    assert run_lox(source) == ["500500"]


def test_recursion_limit_is_restored_after_run():
    limit_before = sys.getrecursionlimit()
    interpreter = Interpreter(output=lambda line: None, recursion_limit=limit_before + 5000)
    assert interpreter.run("fun f(n) { if (n > 0) f(n - 1); } f(300);").ok
    assert sys.getrecursionlimit() == limit_before


def test_large_integral_numbers_print_every_digit(run_lox):
    assert run_lox("print 100000000000000000000; print 2 * 1000000000000;") == [
        "100000000000000000000",
        "2000000000000",
    ]
