"""Tests for intlang.evaluator."""

import io

import pytest

from intlang import Document, Environment, eval_node, evaluate
from intlang.errors import (
    ArityError,
    CallDepthExceeded,
    FunctionRedefinition,
    NestingTooDeep,
    NoValueError,
    UnboundVariable,
    UndefinedFunction,
)
from intlang.model import (
    INT32_MAX,
    INT32_MIN,
    Add,
    Call,
    Define,
    DefineFn,
    Empty,
    Equal,
    For,
    Ident,
    If,
    Less,
    More,
    NotEqual,
    Number,
    Print,
    Sub,
    While,
)


def _value(node, doc=None):
    return eval_node(node, doc or Document(), io.StringIO())


def _run(*nodes, env=None):
    out = io.StringIO()
    doc = evaluate(list(nodes), env, out)
    return doc, out.getvalue()


class TestLiterals:
    @pytest.mark.parametrize("n", [0, 1, -1, 69, INT32_MAX, INT32_MIN])
    def test_number(self, n):
        assert _value(Number(n)) == n

    def test_ident_after_define(self):
        doc = Document()
        _value(Define("x", Number(5)), doc)
        assert _value(Ident("x"), doc) == 5

    def test_unbound_ident(self):
        with pytest.raises(UnboundVariable) as excinfo:
            _value(Ident("nope"))
        assert excinfo.value.name == "nope"


class TestDefine:
    def test_returns_empty(self):
        assert _value(Define("x", Number(1))) is Empty

    def test_overwrite(self):
        doc, _ = _run(Define("x", Number(5)), Define("x", Number(7)))
        assert doc.variables == {"x": 7}

    def test_value_is_evaluated(self):
        doc, _ = _run(
            Define("a", Number(5)),
            Define("b", Add(Ident("a"), Number(10))),
        )
        assert doc.variables == {"a": 5, "b": 15}

    def test_statement_as_value(self):
        with pytest.raises(NoValueError):
            _run(Define("x", Print(())))


class TestArithmetic:
    def test_add(self):
        assert _value(Add(Number(2), Number(3))) == 5

    def test_sub(self):
        assert _value(Sub(Number(2), Number(3))) == -1

    def test_add_wraps(self):
        assert _value(Add(Number(INT32_MAX), Number(1))) == INT32_MIN

    def test_sub_wraps(self):
        assert _value(Sub(Number(INT32_MIN), Number(1))) == INT32_MAX

    def test_left_to_right(self):
        doc = Document()
        _value(Define("a", Number(1)), doc)
        # the right operand runs after the left one has been read
        with pytest.raises(NoValueError):
            _value(Add(Ident("a"), Define("a", Number(2))), doc)
        assert doc.variables["a"] == 2


class TestComparisons:
    @pytest.mark.parametrize(
        "cls, a, b, expected",
        [
            (Equal, 3, 3, 1),
            (Equal, 3, 4, 0),
            (NotEqual, 3, 4, 1),
            (NotEqual, 3, 3, 0),
            (Less, 1, 2, 1),
            (Less, 2, 2, 0),
            (Less, INT32_MIN, INT32_MAX, 1),
            (More, 2, 1, 1),
            (More, 2, 2, 0),
            (More, -1, 0, 0),
        ],
    )
    def test_yields_zero_or_one(self, cls, a, b, expected):
        assert _value(cls(Number(a), Number(b))) == expected


class TestPrint:
    def test_format(self):
        _, out = _run(Print((Number(5), Number(15))))
        assert out == "5 15 \n"

    def test_empty_print(self):
        _, out = _run(Print(()))
        assert out == "\n"

    def test_recorded_on_document(self):
        doc, _ = _run(Print((Number(1),)), Print((Number(2), Number(3))))
        assert doc.output == ["1 ", "2 3 "]

    def test_defaults_to_stdout(self, capsys):
        evaluate([Print((Number(42),))])
        assert capsys.readouterr().out == "42 \n"

    def test_statement_argument(self):
        with pytest.raises(NoValueError):
            _run(Print((Define("a", Number(1)),)))


class TestIf:
    def test_true_runs_body(self):
        _, out = _run(If(Number(1), (Print((Number(69),)),)))
        assert out == "69 \n"

    def test_false_no_effect(self):
        doc, out = _run(
            If(Number(0), (Define("x", Number(1)), Print((Number(1),))))
        )
        assert out == ""
        assert doc.variables == {}

    def test_any_nonzero_is_true(self):
        _, out = _run(If(Number(-3), (Print((Number(1),)),)))
        assert out == "1 \n"


class TestWhile:
    def test_initially_false(self):
        doc, out = _run(While(Number(0), (Print((Number(1),)),)))
        assert out == ""
        assert doc.variables == {}

    def test_counts(self):
        doc, out = _run(
            Define("n", Number(0)),
            While(
                Less(Ident("n"), Number(3)),
                (Print((Ident("n"),)), Define("n", Add(Ident("n"), Number(1)))),
            ),
        )
        assert out == "0 \n1 \n2 \n"
        assert doc.variables == {"n": 3}


class TestFor:
    def test_prints_counter(self):
        doc, out = _run(
            For(Number(0), Number(5), Number(1), (Print((Ident("_i"),)),))
        )
        assert out == "0 \n1 \n2 \n3 \n4 \n"
        assert "_i" not in doc.variables

    def test_counter_unbound_after_loop(self):
        doc, _ = _run(For(Number(0), Number(2), Number(1), ()))
        with pytest.raises(UnboundVariable):
            _value(Ident("_i"), doc)

    def test_step(self):
        _, out = _run(For(Number(1), Number(10), Number(4), (Print((Ident("_i"),)),)))
        assert out == "1 \n5 \n9 \n"

    def test_empty_range(self):
        _, out = _run(For(Number(5), Number(5), Number(1), (Print((Ident("_i"),)),)))
        assert out == ""

    def test_bound_and_step_evaluated_once(self):
        doc, out = _run(
            Define("s", Number(1)),
            Define("b", Number(3)),
            For(
                Number(0),
                Ident("b"),
                Ident("s"),
                (
                    Print((Ident("_i"),)),
                    Define("s", Number(10)),
                    Define("b", Number(100)),
                ),
            ),
        )
        assert out == "0 \n1 \n2 \n"

    def test_body_assignment_does_not_change_counter(self):
        _, out = _run(
            For(
                Number(0),
                Number(3),
                Number(1),
                (Define("_i", Number(50)), Print((Ident("_i"),))),
            )
        )
        assert out == "50 \n50 \n50 \n"

    def test_counter_removed_when_body_fails(self):
        env = Environment()
        with pytest.raises(UnboundVariable):
            _run(For(Number(0), Number(3), Number(1), (Ident("missing"),)), env=env)
        assert "_i" not in env.variables

    def test_nested_loops(self):
        _, out = _run(
            For(
                Number(0),
                Number(2),
                Number(1),
                (For(Number(0), Number(2), Number(1), (Print((Ident("_i"),)),)),),
            )
        )
        assert out == "0 \n1 \n0 \n1 \n"

    def test_outer_counter_restored_after_inner_loop(self):
        _, out = _run(
            For(
                Number(0),
                Number(2),
                Number(1),
                (
                    For(Number(0), Number(1), Number(1), ()),
                    Print((Ident("_i"),)),
                ),
            )
        )
        assert out == "0 \n1 \n"

    def test_existing_binding_restored(self):
        doc, _ = _run(
            Define("_i", Number(42)),
            For(Number(0), Number(3), Number(1), ()),
        )
        assert doc.variables == {"_i": 42}


class TestFunctions:
    def test_define_stores(self):
        doc, out = _run(DefineFn("f", ("x",), (Print((Ident("x"),)),)))
        assert out == ""
        assert doc.functions["f"].params == ("x",)
        assert doc.functions["f"].body == (Print((Ident("x"),)),)

    def test_redefinition(self):
        with pytest.raises(FunctionRedefinition):
            _run(DefineFn("f", (), ()), DefineFn("f", (), ()))

    def test_call_returns_last_value(self):
        doc, _ = _run(
            DefineFn("plus", ("a", "b"), (Add(Ident("a"), Ident("b")),)),
            Define("r", Call("plus", (Number(2), Number(40)))),
        )
        assert doc.variables == {"r": 42}

    def test_empty_body_has_no_value(self):
        doc = Document()
        _value(DefineFn("nothing", (), ()), doc)
        assert _value(Call("nothing", ()), doc) is Empty

    def test_params_do_not_leak(self):
        doc, _ = _run(
            DefineFn("f", ("x",), (Define("y", Ident("x")), Ident("y"))),
            Define("r", Call("f", (Number(3),))),
        )
        assert doc.variables == {"r": 3}
        assert doc.environment.frames == []

    def test_reads_globals(self):
        doc, _ = _run(
            Define("g", Number(7)),
            DefineFn("getg", (), (Ident("g"),)),
            Define("r", Call("getg", ())),
        )
        assert doc.variables["r"] == 7

    def test_recursion(self):
        countdown = DefineFn(
            "countdown",
            ("n",),
            (
                If(
                    More(Ident("n"), Number(0)),
                    (
                        Print((Ident("n"),)),
                        Call("countdown", (Sub(Ident("n"), Number(1)),)),
                    ),
                ),
                Ident("n"),
            ),
        )
        _, out = _run(countdown, Call("countdown", (Number(3),)))
        assert out == "3 \n2 \n1 \n"

    def test_call_depth_limit(self):
        env = Environment(max_call_depth=10)
        with pytest.raises(CallDepthExceeded):
            _run(
                DefineFn("loop", (), (Call("loop", ()),)),
                Call("loop", ()),
                env=env,
            )
        assert env.frames == []

    def test_undefined(self):
        with pytest.raises(UndefinedFunction) as excinfo:
            _run(Call("ghost", ()))
        assert excinfo.value.name == "ghost"

    def test_arity(self):
        with pytest.raises(ArityError) as excinfo:
            _run(DefineFn("f", ("a",), (Ident("a"),)), Call("f", ()))
        assert excinfo.value.expected == 1
        assert excinfo.value.got == 0


class TestEvaluate:
    def test_returns_document(self):
        doc, _ = _run(Define("a", Number(69)))
        assert isinstance(doc, Document)
        assert doc.variables == {"a": 69}
        assert doc.output == []

    def test_uses_given_environment(self):
        env = Environment()
        env.set_var("pre", 1)
        doc, _ = _run(Define("b", Add(Ident("pre"), Number(1))), env=env)
        assert doc.environment is env
        assert env.variables == {"pre": 1, "b": 2}

    def test_fail_fast(self):
        doc = Document()
        with pytest.raises(UnboundVariable):
            doc.merge(
                [Define("a", Number(1)), Ident("x"), Define("b", Number(2))],
                io.StringIO(),
            )
        assert doc.variables == {"a": 1}

    def test_rejects_non_nodes(self):
        with pytest.raises(TypeError):
            _value("not a node")

    def test_deep_nesting(self):
        node = Number(0)
        for _ in range(5000):
            node = Add(Number(1), node)
        env = Environment()
        with pytest.raises(NestingTooDeep):
            _run(Print((node,)), env=env)
        assert env.frames == []

    def test_deep_nesting_single_node(self):
        node = Number(0)
        for _ in range(5000):
            node = Sub(node, Number(1))
        with pytest.raises(NestingTooDeep):
            _value(node)
