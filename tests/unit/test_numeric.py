from __future__ import annotations

import math

from thermalcore.models.numeric import safe_div, safe_exp, safe_pow


def test_safe_exp():
    assert safe_exp(0.0) == 1.0
    assert safe_exp(1000.0) == math.inf
    assert safe_exp(-1000.0) == 0.0


def test_safe_pow():
    assert safe_pow(2.0, 10.0) == 1024.0
    assert safe_pow(10.0, 400.0) == math.inf


def test_safe_div():
    assert safe_div(1.0, 4.0) == 0.25
    assert safe_div(1.0, 0.0) == math.inf
    assert safe_div(-1.0, 0.0) == -math.inf
    assert safe_div(1.0, -0.0) == -math.inf
    assert math.isnan(safe_div(0.0, 0.0))
