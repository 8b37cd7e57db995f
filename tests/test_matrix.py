"""Unit tests for the dense Matrix type.

Tests cover:
- Construction, identity and zero builders
- Element and row access with bounds checking
- Multiplication, addition, subtraction and scalar operators
- Transpose and equality
"""

import pytest


def _sample():
    from src.python.core.matrix import Matrix

    return Matrix.from_rows(
        [
            [1.0, 2.0, 3.0, 4.0],
            [-1.5, 0.25, 7.0, 2.0],
            [0.0, 9.0, -3.0, 1.0],
        ]
    )


class TestMatrixConstruction:
    """Tests for building matrices."""

    def test_new_matrix_is_zero(self):
        """Test a new matrix is filled with zeros."""
        from src.python.core.matrix import Matrix

        m = Matrix(2, 3)
        assert m.shape == (2, 3)
        assert all(m[r, c] == 0.0 for r in range(2) for c in range(3))

    def test_negative_size_rejected(self):
        """Test negative dimensions raise ValueError."""
        from src.python.core.matrix import Matrix

        with pytest.raises(ValueError):
            Matrix(-1, 2)

    def test_identity(self):
        """Test identity has ones on the diagonal only."""
        from src.python.core.matrix import Matrix

        m = Matrix.identity(3)
        assert m.row(0) == (1.0, 0.0, 0.0)
        assert m.row(1) == (0.0, 1.0, 0.0)
        assert m.row(2) == (0.0, 0.0, 1.0)

    def test_from_rows_ragged(self):
        """Test rows of different lengths are rejected."""
        from src.python.core.matrix import Matrix

        with pytest.raises(ValueError):
            Matrix.from_rows([[1.0, 2.0], [3.0]])

    def test_set_size_keeps_data_for_same_shape(self):
        """Test set_size only clears when the shape changes."""
        m = _sample()
        m.set_size(3, 4)
        assert m.get(0, 1) == 2.0
        m.set_size(2, 2)
        assert m.shape == (2, 2)
        assert m.get(0, 1) == 0.0

    def test_set_identity_and_zero(self):
        """Test resetting a matrix to identity or zero."""
        from src.python.core.matrix import Matrix

        m = _sample()
        m.set_identity(4)
        assert m == Matrix.identity(4)
        m.set_zero(2)
        assert m == Matrix(2, 2)

    def test_copy_is_independent(self):
        """Test copies do not share storage."""
        m = _sample()
        c = m.copy()
        c.set(0, 0, 99.0)
        assert m.get(0, 0) == 1.0


class TestMatrixAccess:
    """Tests for element and row access."""

    def test_get_set(self):
        """Test reading back a written element."""
        from src.python.core.matrix import Matrix

        m = Matrix(2, 2)
        m.set(1, 0, 5.0)
        m[0, 1] = 6.0
        assert m.get(1, 0) == 5.0
        assert m[0, 1] == 6.0

    def test_out_of_range(self):
        """Test indices outside the shape raise MatrixIndexError."""
        from src.python.core.errors import MatrixIndexError
        from src.python.core.matrix import Matrix

        m = Matrix(2, 2)
        with pytest.raises(MatrixIndexError):
            m.get(2, 0)
        with pytest.raises(MatrixIndexError):
            m.set(0, 2, 1.0)
        with pytest.raises(MatrixIndexError):
            m.get(-1, 0)

    def test_index_error_is_index_error(self):
        """Test MatrixIndexError can be caught as IndexError."""
        from src.python.core.matrix import Matrix

        with pytest.raises(IndexError):
            Matrix(1, 1).row(3)

    def test_row_by_index(self):
        """Test m[i] returns the row as a tuple."""
        m = _sample()
        assert m[1] == (-1.5, 0.25, 7.0, 2.0)

    def test_set_row_length(self):
        """Test set_row checks the number of values."""
        from src.python.core.errors import MatrixSizeError

        m = _sample()
        m.set_row(2, [1.0, 1.0, 1.0, 1.0])
        assert m.row(2) == (1.0, 1.0, 1.0, 1.0)
        with pytest.raises(MatrixSizeError):
            m.set_row(0, [1.0, 2.0])

    def test_set_all_row_major(self):
        """Test set_all fills row by row and checks the count."""
        from src.python.core.errors import MatrixSizeError
        from src.python.core.matrix import Matrix

        m = Matrix(2, 2)
        m.set_all([1.0, 2.0, 3.0, 4.0])
        assert m.row(0) == (1.0, 2.0)
        assert m.row(1) == (3.0, 4.0)
        with pytest.raises(MatrixSizeError):
            m.set_all([1.0, 2.0, 3.0])


class TestMatrixArithmetic:
    """Tests for matrix operators."""

    def test_times_identity(self):
        """Test A * I == A exactly."""
        from src.python.core.matrix import Matrix

        a = _sample()
        assert a * Matrix.identity(4) == a
        assert Matrix.identity(3) @ a == a

    def test_minus_self_is_zero(self):
        """Test A - A is the zero matrix."""
        from src.python.core.matrix import Matrix

        a = _sample()
        assert a - a == Matrix(3, 4)

    def test_double_transpose(self):
        """Test transposing twice gives back the matrix."""
        a = _sample()
        assert a.transpose().shape == (4, 3)
        assert a.transpose().transpose() == a

    def test_known_product(self):
        """Test a hand-computed 2x2 product."""
        from src.python.core.matrix import Matrix

        a = Matrix.from_rows([[1.0, 2.0], [3.0, 4.0]])
        b = Matrix.from_rows([[5.0, 6.0], [7.0, 8.0]])
        assert Matrix.multiply(a, b) == Matrix.from_rows([[19.0, 22.0], [43.0, 50.0]])

    def test_multiply_shape_mismatch(self):
        """Test incompatible shapes raise MatrixSizeError with the shapes."""
        from src.python.core.errors import MatrixSizeError
        from src.python.core.matrix import Matrix

        with pytest.raises(MatrixSizeError) as excinfo:
            Matrix(2, 3) * Matrix(2, 3)
        assert excinfo.value.left_shape == (2, 3)
        assert excinfo.value.right_shape == (2, 3)

    def test_add_shape_mismatch(self):
        """Test adding different shapes raises MatrixSizeError."""
        from src.python.core.errors import MatrixSizeError
        from src.python.core.matrix import Matrix

        with pytest.raises(MatrixSizeError):
            Matrix(2, 2) + Matrix(2, 3)
        with pytest.raises(MatrixSizeError):
            Matrix(2, 2) - Matrix(3, 2)

    def test_scalar_operators(self):
        """Test scaling and division by a scalar."""
        from src.python.core.matrix import Matrix

        a = Matrix.from_rows([[1.0, -2.0], [4.0, 8.0]])
        assert a * 2.0 == Matrix.from_rows([[2.0, -4.0], [8.0, 16.0]])
        assert 2.0 * a == a * 2.0
        assert a / 4.0 == Matrix.from_rows([[0.25, -0.5], [1.0, 2.0]])

    def test_divide_by_zero(self):
        """Test dividing by zero raises."""
        from src.python.core.matrix import Matrix

        with pytest.raises(ZeroDivisionError):
            Matrix.identity(2) / 0.0

    def test_in_place_operators(self):
        """Test in-place forms return the same object."""
        from src.python.core.matrix import Matrix

        m = Matrix.identity(2)
        alias = m
        m += Matrix.identity(2)
        m *= 3.0
        m -= Matrix.identity(2)
        assert m is alias
        assert m == Matrix.from_rows([[5.0, 0.0], [0.0, 5.0]])

    def test_almost_equal(self):
        """Test tolerant comparison."""
        a = _sample()
        b = a.copy()
        b.set(0, 0, 1.0 + 1e-12)
        assert a != b
        assert a.almost_equal(b)
