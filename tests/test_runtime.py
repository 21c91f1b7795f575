import io

import pytest

from vanarize.collector import Collector
from vanarize.objects import ObjArray, ObjFunction
from vanarize.runtime import Runtime
from vanarize.value import (
    VAL_FALSE,
    VAL_NULL,
    VAL_TRUE,
    bool_to_value,
    is_obj,
    number_to_value,
    value_to_number,
)


@pytest.fixture
def runtime():
    return Runtime(Collector())


def test_add_numbers(runtime):
    result = runtime.add(number_to_value(2.0), number_to_value(3.5))
    assert value_to_number(result) == 2.0 + 3.5


def test_add_strings_concatenates(runtime):
    result = runtime.add(runtime.new_string("ab"), runtime.new_string("cd"))
    assert is_obj(result)
    assert runtime.as_string(result).chars == "abcd"


def test_add_string_and_number(runtime):
    result = runtime.add(runtime.new_string("x="), number_to_value(1.5))
    assert runtime.as_string(result).chars == "x=1.5"


def test_add_number_and_string(runtime):
    result = runtime.add(number_to_value(7.0), runtime.new_string(" items"))
    assert runtime.as_string(result).chars == "7 items"


def test_add_uses_fourteen_significant_digits(runtime):
    result = runtime.add(runtime.new_string(""), number_to_value(0.1 + 0.2))
    assert runtime.as_string(result).chars == "0.3"


def test_add_incompatible_gives_nil(runtime):
    assert runtime.add(VAL_TRUE, number_to_value(1.0)) == VAL_NULL
    assert runtime.add(runtime.new_string("a"), VAL_NULL) == VAL_NULL
    assert runtime.add(runtime.new_array(2), runtime.new_string("a")) == VAL_NULL


def test_equal_is_identity(runtime):
    first = runtime.new_string("same")
    second = runtime.new_string("same")
    assert runtime.equal(first, first) == VAL_TRUE
    assert runtime.equal(first, second) == VAL_FALSE
    assert runtime.equal(number_to_value(4.0), number_to_value(4.0)) == VAL_TRUE
    assert runtime.equal(VAL_TRUE, VAL_FALSE) == VAL_FALSE


def test_as_string_rejects_non_strings(runtime):
    assert runtime.as_string(number_to_value(1.0)) is None
    assert runtime.as_string(VAL_NULL) is None
    assert runtime.as_string(runtime.new_array(1)) is None


def test_new_array_is_empty_with_capacity(runtime):
    value = runtime.new_array(4)
    array = runtime.collector.resolve(value)
    assert isinstance(array, ObjArray)
    assert len(array) == 0
    assert array.capacity == 4


def test_new_array_negative_capacity(runtime):
    with pytest.raises(ValueError):
        runtime.new_array(-1)


@pytest.mark.parametrize("number", [3.0, -12.0, 0.0, 1e6])
def test_format_whole_numbers_as_integers(runtime, number):
    assert runtime.format_value(number_to_value(number)) == str(int(number))


def test_format_fraction(runtime):
    assert runtime.format_value(number_to_value(2.5)) == "2.5"


def test_format_non_finite(runtime):
    assert runtime.format_value(number_to_value(float("inf"))) == "inf"
    assert runtime.format_value(number_to_value(float("nan"))) == "nan"


def test_format_singletons(runtime):
    assert runtime.format_value(bool_to_value(True)) == "true"
    assert runtime.format_value(bool_to_value(False)) == "false"
    assert runtime.format_value(VAL_NULL) == "nil"


def test_format_string(runtime):
    assert runtime.format_value(runtime.new_string("hello")) == "hello"


def test_format_unknown_object(runtime):
    value = runtime.collector.allocate(ObjFunction(arity=1))
    assert runtime.format_value(value) == f"Unknown Value: {value:x}"


def test_print_value_writes_line(runtime):
    out = io.StringIO()
    runtime.print_value(runtime.new_string("hi"), out)
    runtime.print_value(VAL_NULL, out)
    assert out.getvalue() == "hi\nnil\n"


def test_print_value_defaults_to_stdout(runtime, capsys):
    runtime.print_value(number_to_value(42.0))
    assert capsys.readouterr().out == "42\n"


def test_default_collector_is_created():
    runtime = Runtime()
    value = runtime.new_string("ok")
    assert runtime.format_value(value) == "ok"