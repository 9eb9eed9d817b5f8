from __future__ import annotations

import pytest

from loxterp import LoxRuntimeError


def test_superclass_method_via_super(run_lox):
    source = """
class A { greet() { return "A"; } }
class B < A { greet() { return super.greet() + "B"; } }
print B().greet();
"""
    assert run_lox(source) == ["AB"]


def test_super_skips_the_instances_own_class(run_lox):
    source = """
class A {
  method() { return "A.method"; }
}
class B < A {
  method() { return "B.method"; }
  test() { return super.method(); }
}
class C < B {}
print C().test();
"""
    # `super` in B refers to A even when called on a C instance.
    assert run_lox(source) == ["A.method"]


def test_initializer_receives_arguments_and_sets_fields(run_lox):
    source = """
class Point {
  init(x, y) {
    this.x = x;
    this.y = y;
  }
}
var p = Point(1, 2);
print p.x;
print p.y;
print p;
"""
    assert run_lox(source) == ["1", "2", "Point instance {x=1, y=2}"]


def test_constructor_yields_instance_not_init_return_value(run_lox):
    source = """
class Foo {
  init() {
    this.ready = true;
    return;
  }
}
var foo = Foo();
print foo.ready;
print foo.init() == foo;
"""
    assert run_lox(source) == ["true", "true"]


def test_explicit_return_value_in_init_is_ignored(run_lox):
    source = """
class Foo {
  init() { return "ignored"; }
}
print Foo();
print Foo().init();
"""
    assert run_lox(source) == ["Foo instance {}", "Foo instance {}"]


def test_inherited_initializer_sets_arity(run_lox):
    source = """
class Base { init(a, b) { this.sum = a + b; } }
class Derived < Base {}
print Derived(2, 3).sum;
"""
    assert run_lox(source) == ["5"]


def test_class_without_init_takes_no_arguments(run_lox_result):
    result, _ = run_lox_result("class Empty {} Empty(1);")
    assert isinstance(result.exception, LoxRuntimeError)
    assert "Expected 0 arguments but got 1." in str(result.exception)


def test_bound_method_remembers_its_instance(run_lox):
    source = """
class Person {
  init(name) { this.name = name; }
  sayName() { print this.name; }
}
var jane = Person("Jane");
var bill = Person("Bill");
bill.sayName = jane.sayName;
bill.sayName();
var method = bill.sayName;
method();
"""
    assert run_lox(source) == ["Jane", "Jane"]


def test_fields_shadow_methods_and_set_bypasses_methods(run_lox):
    source = """
class Box {
  value() { return "method"; }
}
var box = Box();
print box.value();
box.value = "field";
print box.value;
"""
    assert run_lox(source) == ["method", "field"]


def test_methods_are_shared_but_binding_is_per_access(run_lox):
    source = """
class Counter {
  init() { this.n = 0; }
  inc() { this.n = this.n + 1; return this.n; }
}
var a = Counter();
var b = Counter();
a.inc(); a.inc();
print a.inc();
print b.inc();
print a.inc == a.inc;
"""
    assert run_lox(source) == ["3", "1", "false"]


def test_this_inside_nested_closure(run_lox):
    source = """
class Thing {
  getCallback() {
    fun localFunction() { print this; }
    return localFunction;
  }
}
var callback = Thing().getCallback();
callback();
"""
    assert run_lox(source) == ["Thing instance {}"]


def test_class_can_reference_itself_in_methods(run_lox):
    source = """
class Node {
  init(next) { this.next = next; }
  wrap() { return Node(this); }
}
var n = Node(nil).wrap();
print n.next.next;
"""
    assert run_lox(source) == ["nil"]


def test_local_class_declaration(run_lox):
    source = """
{
  class Local { name() { return "local"; } }
  print Local().name();
  print Local;
}
"""
    assert run_lox(source) == ["local", "<class Local>"]


def test_super_chain_three_levels(run_lox):
    source = """
class A { say() { return "A"; } }
class B < A { say() { return "B" + super.say(); } }
class C < B { say() { return "C" + super.say(); } }
print C().say();
"""
    assert run_lox(source) == ["CBA"]


def test_super_init_from_subclass_initializer(run_lox):
    source = """
class Base { init(v) { this.v = v; } }
class Sub < Base {
  init(v) {
    super.init(v * 2);
    this.extra = "x";
  }
}
var s = Sub(21);
print s.v;
print s.extra;
"""
    assert run_lox(source) == ["42", "x"]


def test_instance_display_avoids_cycles(run_lox):
    source = """
class Loop {}
var a = Loop();
a.self = a;
a.n = 1;
print a;
"""
    assert run_lox(source) == ["Loop instance {self=Loop instance, n=1}"]


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("var NotAClass = 1; class Sub < NotAClass {}", "Superclass must be a class."),
        ('"text".length;', "Only instances have properties."),
        ("var n = 1; n.field = 2;", "Only instances have fields."),
        ("class A {} A().missing;", "Undefined property 'missing'."),
        (
            "class A {} class B < A { m() { return super.missing(); } } B().m();",
            "Undefined property 'missing'.",
        ),
        ('"not callable"();', "Can only call functions and classes."),
    ],
)
def test_object_model_runtime_errors(run_lox, source, message):
    with pytest.raises(LoxRuntimeError, match=message.replace(".", r"\.")):
        run_lox(source)
