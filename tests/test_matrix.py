import pytest
from hypothesis import given, strategies as st

from nnkit.matrix import NDArray
from nnkit.vector import Vector


def _matrices(max_rows=4, max_cols=4):
    return st.integers(1, max_rows).flatmap(
        lambda r: st.integers(1, max_cols).flatmap(
            lambda c: st.lists(
                st.lists(st.integers(-20, 20), min_size=c, max_size=c),
                min_size=r,
                max_size=r,
            )
        )
    )


def _identity(n):
    eye = NDArray((n, n))
    for i in range(n):
        eye.set(i, i, 1)
    return eye


def test_new_array_is_zero_filled_and_contiguous():
    arr = NDArray((2, 3))
    assert arr.shape == (2, 3)
    assert arr.ndim == 2
    assert arr.size == 6
    assert arr.is_contiguous
    assert arr.tolist() == [[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]


def test_one_dimensional_shape_rejected():
    with pytest.raises(ValueError):
        NDArray((4,))


def test_from_rows_round_trip():
    rows = [[1, 2, 3], [4, 5, 6]]
    assert NDArray.from_rows(rows).tolist() == rows


def test_from_rows_ragged_rejected():
    with pytest.raises(ValueError):
        NDArray.from_rows([[1, 2], [3]])


def test_row_index_returns_writable_vector_view():
    arr = NDArray.from_rows([[1, 2], [3, 4]])
    row = arr[1]
    assert isinstance(row, Vector)
    assert row.tolist() == [3, 4]
    row[0] = 9
    assert arr.get(1, 0) == 9


def test_three_dimensional_index_returns_array_view():
    arr = NDArray((2, 3, 4))
    sub = arr[1]
    assert isinstance(sub, NDArray)
    assert sub.shape == (3, 4)
    sub[2][3] = 7
    assert arr[1][2][3] == 7
    assert arr.max() == 7


def test_index_out_of_range():
    arr = NDArray.from_rows([[1, 2], [3, 4]])
    assert arr[1].tolist() == [3, 4]
    with pytest.raises(IndexError):
        arr[2]
    assert arr.tolist() == [[1, 2], [3, 4]]


def test_transpose_shares_data():
    arr = NDArray.from_rows([[1, 2, 3], [4, 5, 6]])
    t = arr.transpose()
    assert t.shape == (3, 2)
    assert not t.is_contiguous
    assert t.tolist() == [list(col) for col in zip(*arr.tolist())]
    t.set(2, 0, 30)
    assert arr.get(0, 2) == 30


def test_transpose_requires_two_dimensions():
    with pytest.raises(ValueError):
        NDArray((2, 2, 2)).transpose()


@given(_matrices())
def test_double_transpose_is_identity(rows):
    arr = NDArray.from_rows(rows)
    assert arr.transpose().transpose().tolist() == rows


def test_copy_is_independent_and_contiguous():
    arr = NDArray.from_rows([[1, 2], [3, 4]])
    t_copy = arr.transpose().copy()
    assert t_copy.is_contiguous
    assert t_copy.tolist() == arr.transpose().tolist()
    t_copy.set(0, 0, 100)
    assert arr.get(0, 0) == 1


def test_scalar_ops_through_transposed_view():
    arr = NDArray.from_rows([[1, 2], [3, 4]])
    view = arr.transpose()
    view *= 2
    view += 1
    assert arr.tolist() == [[x * 2 + 1 for x in row] for row in [[1, 2], [3, 4]]]


def test_zeros_matches_shape():
    arr = NDArray.from_rows([[1, 2, 3]])
    z = arr.zeros()
    assert z.shape == arr.shape
    assert z.max() == 0 and z.min() == 0


def test_matmul_worked_example():
    a = NDArray.from_rows([[1, 2], [3, 4]])
    b = NDArray.from_rows([[5, 6], [7, 8]])
    assert (a @ b).tolist() == [[19, 22], [43, 50]]


@given(_matrices())
def test_matmul_identity(rows):
    arr = NDArray.from_rows(rows)
    assert (arr @ _identity(arr.shape[1])).tolist() == rows
    assert (_identity(arr.shape[0]) @ arr).tolist() == rows


@given(_matrices(), st.integers(1, 4), st.data())
def test_matmul_transpose_rule(rows, cols, data):
    a = NDArray.from_rows(rows)
    b_rows = data.draw(
        st.lists(
            st.lists(st.integers(-20, 20), min_size=cols, max_size=cols),
            min_size=a.shape[1],
            max_size=a.shape[1],
        )
    )
    b = NDArray.from_rows(b_rows)
    assert (a @ b).transpose().tolist() == (b.transpose() @ a.transpose()).tolist()


def test_matmul_shape_mismatch():
    with pytest.raises(ValueError):
        NDArray((2, 3)) @ NDArray((2, 3))


def test_matmul_requires_two_dimensions():
    with pytest.raises(ValueError):
        NDArray((2, 2, 2)) @ NDArray((2, 2, 2))


def test_matrix_vector_product_is_column():
    a = NDArray.from_rows([[1, 2, 3], [4, 5, 6]])
    v = Vector.from_values([1, 0, -1])
    col = a @ v
    assert col.shape == (2, 1)
    assert col.tolist() == (a @ v.transpose()).tolist()


def test_matrix_vector_length_mismatch():
    with pytest.raises(ValueError):
        NDArray((2, 3)) @ Vector(2)


def test_vector_transpose_gives_column_view():
    v = Vector.from_values([1, 2, 3])
    col = v.transpose()
    assert col.shape == (3, 1)
    col.set(1, 0, 8)
    assert v[1] == 8


def test_assign_copies_and_detaches():
    target = NDArray((1, 1))
    source = NDArray.from_rows([[1, 2], [3, 4]])
    target.assign(source.transpose())
    assert target.shape == (2, 2)
    assert target.is_contiguous
    assert target.tolist() == source.transpose().tolist()
    source.set(0, 0, 50)
    assert target.get(0, 0) == 1


def test_max_min():
    arr = NDArray.from_rows([[3, -1], [7, 2]])
    assert arr.max() == 7
    assert arr.min() == -1
    assert arr.transpose().max() == arr.max()


def test_max_of_empty_raises():
    with pytest.raises(IndexError):
        NDArray((0, 3)).max()


def test_get_set_increment():
    arr = NDArray((2, 2))
    arr.set(0, 1, 5)
    arr.increment(0, 1, 2)
    assert arr.get(0, 1) == 7
    assert arr[0][1] == 7


def test_str_small():
    arr = NDArray.from_rows([[1, 2], [3, 4]])
    assert str(arr) == "[\n [ 1 2 ]\n [ 3 4 ]\n]"


def test_str_elides_long_arrays():
    arr = NDArray.from_rows([[i] for i in range(10)])
    text = str(arr)
    assert "\n ... \n" in text
    assert str(arr[9]) in text
    assert str(arr[5]) not in text
    assert text.startswith("[\n ") and text.endswith("\n]")


def test_equality():
    a = NDArray.from_rows([[1, 2], [3, 4]])
    assert a == a.copy()
    assert not (a == a.transpose())