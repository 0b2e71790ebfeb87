import math

import numpy as np
import pytest

from dnzernike.core.zernike import BinomialTable, RadialPolynomial, check_pair, zernike_pairs


def test_binomial_table_edges_and_symmetry():
    table = BinomialTable.build(20)
    for n in range(21):
        assert table.get(n, 0) == 1.0
        assert table.get(n, n) == 1.0
        for k in range(n + 1):
            assert table.get(n, k) == table.get(n, n - k)
            assert table.get(n, k) == pytest.approx(math.comb(n, k), rel=1e-12)


def test_binomial_table_is_read_only_and_bounded():
    table = BinomialTable.build(4)
    with pytest.raises(ValueError):
        table.d[2, 1] = 5.0
    with pytest.raises(IndexError):
        table.get(5, 1)
    with pytest.raises(IndexError):
        table.get(3, 4)
    with pytest.raises(ValueError):
        BinomialTable.build(-1)


def test_radial_polynomial_known_forms():
    table = BinomialTable.build(6)
    assert RadialPolynomial.build(2, 0, table).coefficients == {2: 2, 0: -1}
    assert RadialPolynomial.build(4, 0, table).coefficients == {4: 6, 2: -6, 0: 1}
    assert RadialPolynomial.build(3, 1, table).coefficients == {3: 3, 1: -2}
    assert RadialPolynomial.build(4, 2, table).coefficients == {4: 4, 2: -3}
    assert RadialPolynomial.build(5, 5, table).coefficients == {5: 1}
    # Negative repetition uses |m|.
    assert RadialPolynomial.build(3, -1, table).coefficients == {3: 3, 1: -2}


def test_radial_polynomial_is_one_at_unit_radius():
    table = BinomialTable.build(12)
    for n, m in zernike_pairs(1, 12):
        assert RadialPolynomial.build(n, m, table).evaluate(1.0) == pytest.approx(1.0, abs=1e-9)


def test_radial_polynomial_scalar_and_array_agree():
    table = BinomialTable.build(6)
    poly = RadialPolynomial.build(6, 2, table)
    r = np.linspace(0.0, 1.0, 11)
    vals = poly.evaluate(r)
    assert vals.shape == r.shape
    for ri, vi in zip(r, vals):
        assert poly.evaluate(float(ri)) == pytest.approx(vi, abs=1e-12)
    assert poly.evaluate(0.5) == pytest.approx(15 * 0.5**6 - 20 * 0.5**4 + 6 * 0.5**2)


def test_illegal_pairs_are_rejected():
    table = BinomialTable.build(5)
    for n, m in [(3, 0), (2, 1), (2, 3), (-1, 0)]:
        with pytest.raises(ValueError):
            check_pair(n, m)
    with pytest.raises(ValueError):
        RadialPolynomial.build(4, 1, table)
    with pytest.raises(ValueError):
        RadialPolynomial.build(6, 0, table)


def test_zernike_pairs_order():
    assert zernike_pairs(2, 4) == [(2, 0), (2, 2), (3, 1), (3, 3), (4, 0), (4, 2), (4, 4)]
    assert zernike_pairs(1, 1) == [(1, 1)]
    with pytest.raises(ValueError):
        zernike_pairs(3, 2)
