import pytest
from bson import ObjectId
from fastapi import HTTPException

from portal.services.ownership import ensure_owner, is_owner, normalize_id


OWNER = ObjectId()


@pytest.mark.parametrize("value", [
    OWNER,
    str(OWNER),
    {"_id": OWNER, "name": "Recruiter"},
    {"id": str(OWNER), "name": "Recruiter"},
])
def test_normalize_id_accepts_every_shape(value):
    assert normalize_id(value) == str(OWNER)


def test_normalize_id_empty_values():
    assert normalize_id(None) is None
    assert normalize_id("  ") is None
    assert normalize_id({"name": "no id"}) is None


def test_ownership_decision_is_the_same_for_every_shape():
    caller = {"user_id": str(OWNER), "role": "recruiter"}
    stranger = {"user_id": str(ObjectId()), "role": "recruiter"}
    shapes = [OWNER, str(OWNER), {"_id": OWNER}]

    assert [is_owner(s, caller) for s in shapes] == [True, True, True]
    assert [is_owner(s, stranger) for s in shapes] == [False, False, False]


def test_admin_owns_everything():
    admin = {"user_id": str(ObjectId()), "role": "admin"}
    assert is_owner(OWNER, admin)
    assert is_owner(None, admin)


def test_missing_owner_is_never_owned_by_non_admin():
    assert not is_owner(None, {"user_id": str(OWNER), "role": "recruiter"})


def test_ensure_owner_raises_403():
    with pytest.raises(HTTPException) as exc:
        ensure_owner(OWNER, {"user_id": str(ObjectId()), "role": "student"}, "nope")
    assert exc.value.status_code == 403
    assert exc.value.detail == "nope"


def test_upper_case_hex_names_the_same_owner():
    caller = {"user_id": str(OWNER), "role": "recruiter"}
    upper = str(OWNER).upper()
    assert normalize_id(upper) == str(OWNER)
    assert is_owner(upper, caller) is is_owner(OWNER, caller) is True
    assert is_owner(OWNER, {"user_id": upper, "role": "recruiter"})


def test_non_object_id_strings_are_compared_as_given():
    assert normalize_id(" legacy-id ") == "legacy-id"
