import pytest
from hypothesis import given
from hypothesis import strategies as st

from nnkit.vector import Vector

ints = st.lists(st.integers(min_value=-1000, max_value=1000), max_size=20)
nonempty_ints = st.lists(st.integers(min_value=-1000, max_value=1000), min_size=1, max_size=20)


def test_new_vector_is_zero_filled():
    v = Vector(4)
    assert len(v) == 4
    assert v.tolist() == [0.0, 0.0, 0.0, 0.0]


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        Vector(-1)


@given(ints)
def test_from_values_round_trip(values):
    v = Vector.from_values(values)
    assert v.tolist() == values
    assert list(iter(v)) == values
    assert len(v) == len(values)


def test_index_out_of_range():
    v = Vector.from_values([1, 2, 3])
    assert v[2] == 3
    with pytest.raises(IndexError):
        v[3]
    with pytest.raises(IndexError):
        v[-1]
    with pytest.raises(IndexError):
        v[5] = 1
    assert v.tolist() == [1, 2, 3]


def test_setitem_then_getitem():
    v = Vector(3)
    v[1] = 7
    assert v[1] == 7
    assert v.tolist()[0] == 0.0


def test_strided_view_reads_buffer():
    buffer = list(range(10))
    v = Vector.view(buffer, 1, 3, 3)
    assert v.tolist() == buffer[1::3][:3]


def test_view_writes_through_to_buffer():
    buffer = list(range(10))
    v = Vector.view(buffer, 1, 3, 3)
    v[1] = 99
    assert buffer[4] == 99


def test_copy_is_independent():
    buffer = list(range(10))
    v = Vector.view(buffer, 0, 2, 4)
    c = v.copy()
    c[0] = 123
    assert buffer[0] == 0
    assert c.tolist()[1:] == v.tolist()[1:]
    assert c.stride == 1


def test_scalar_ops_on_view_touch_only_viewed_elements():
    buffer = list(range(6))
    v = Vector.view(buffer, 0, 2, 3)
    v *= 10
    v += 1
    assert buffer[1::2] == [1, 3, 5]
    assert buffer[0::2] == [x * 10 + 1 for x in [0, 2, 4]]


@given(ints, st.integers(min_value=-5, max_value=5))
def test_scalar_mult_matches_elementwise(values, k):
    v = Vector.from_values(values)
    v *= k
    assert v.tolist() == [x * k for x in values]


@given(ints, st.integers(min_value=-5, max_value=5))
def test_scalar_add_matches_elementwise(values, k):
    v = Vector.from_values(values)
    v += k
    assert v.tolist() == [x + k for x in values]


def test_zeros_same_length_and_independent():
    v = Vector.from_values([4, 5, 6])
    z = v.zeros()
    assert len(z) == len(v)
    assert all(x == 0 for x in z)
    z[0] = 1
    assert v[0] == 4


@given(ints)
def test_dot_with_ones_is_sum(values):
    v = Vector.from_values(values)
    ones = Vector.from_values([1] * len(values))
    assert v @ ones == sum(values)


@given(ints)
def test_dot_with_self_non_negative(values):
    v = Vector.from_values(values)
    assert v @ v >= 0


@given(st.data())
def test_dot_commutative(data):
    n = data.draw(st.integers(min_value=0, max_value=10))
    a = data.draw(st.lists(st.integers(-100, 100), min_size=n, max_size=n))
    b = data.draw(st.lists(st.integers(-100, 100), min_size=n, max_size=n))
    va, vb = Vector.from_values(a), Vector.from_values(b)
    assert va @ vb == vb @ va


def test_dot_length_mismatch():
    with pytest.raises(ValueError):
        Vector.from_values([1, 2]) @ Vector.from_values([1, 2, 3])


def test_str_short_integers():
    assert str(Vector.from_values([1, 2, 3])) == "[ 1 2 3 ]"


def test_str_long_is_elided():
    v = Vector.from_values(list(range(1, 9)))
    assert str(v) == "[ 1 2 3 ... 6 7 8 ]"


def test_str_float_format():
    assert str(Vector.from_values([0.5])) == "[ 0.500000 ]"


@given(nonempty_ints)
def test_max_min(values):
    v = Vector.from_values(values)
    assert v.max() == max(values)
    assert v.min() == min(values)


def test_max_min_empty():
    v = Vector(0)
    with pytest.raises(IndexError):
        v.max()
    with pytest.raises(IndexError):
        v.min()


def test_assign_copies_into_view():
    buffer = [0] * 6
    v = Vector.view(buffer, 1, 2, 3)
    result = v.assign(Vector.from_values([7, 8, 9]))
    assert result is v
    assert buffer[1::2] == [7, 8, 9]
    assert buffer[0::2] == [0, 0, 0]


def test_assign_length_mismatch():
    with pytest.raises(ValueError):
        Vector(2).assign(Vector.from_values([1, 2, 3]))


def test_transpose_is_column_view():
    values = [3, 1, 4]
    v = Vector.from_values(values)
    t = v.transpose()
    assert t.tolist() == [[x] for x in values]
    v[0] = 42
    assert t.tolist()[0] == [42]


def test_non_integer_index_rejected():
    with pytest.raises(TypeError):
        Vector(2)["a"]