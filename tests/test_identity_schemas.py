from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from mockrise.core.enums import RoleEnum
from mockrise.modules.identity.schemas import UserPublic
from tests.fakes import make_user


def test_public_identity_is_built_from_user_rows() -> None:
    interviewer = make_user(RoleEnum.INTERVIEWER, name="Dana Reyes")

    public = UserPublic.model_validate(interviewer)

    assert public.model_dump(mode="json") == {
        "id": str(interviewer.id),
        "name": "Dana Reyes",
        "email": "dana.reyes@mockrise.dev",
    }


def test_public_identity_rejects_malformed_email() -> None:
    with pytest.raises(ValidationError):
        UserPublic(id=uuid4(), name="Broken", email="not-an-email")
