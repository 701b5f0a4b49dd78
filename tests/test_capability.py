"""Admin capability tests."""

import copy
import pickle

import pytest

from wagerbook.ledger.capability import AdminCapability, authorize


def test_capability_cannot_be_duplicated():
    cap = AdminCapability("m1")
    assert copy.copy(cap) is cap
    assert copy.deepcopy(cap) is cap
    with pytest.raises(TypeError):
        pickle.dumps(cap)


def test_authorize_requires_the_issued_capability():
    cap = AdminCapability("m1")
    other = AdminCapability("m1")
    assert authorize(cap, cap)
    assert not authorize(other, cap)
    assert not authorize(None, cap)
    assert not authorize("m1", cap)
    assert cap != other
