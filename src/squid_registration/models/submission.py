"""Role-tagged registration submissions accepted at the API boundary"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from squid_registration.models.registration import RegistrationRole

PHONE_PATTERN = r"^[\d\s()\-+]+$"

YesNo = Literal["yes", "no"]


class _SubmissionBase(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        extra="ignore",
    )

    role: RegistrationRole

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # HTML forms post empty strings for untouched inputs
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PlayerSubmission(_SubmissionBase):
    """Registration as a player"""

    first_name: Optional[str] = Field(
        default=None, alias="firstName", min_length=1, max_length=50
    )
    last_name: Optional[str] = Field(
        default=None, alias="lastName", min_length=1, max_length=50
    )
    player_class: Optional[str] = Field(
        default=None, alias="class", min_length=1, max_length=10
    )
    phone: Optional[str] = Field(default=None, max_length=20, pattern=PHONE_PATTERN)


class GuardSubmission(_SubmissionBase):
    """Registration as a guard"""

    guard_name: Optional[str] = Field(
        default=None, alias="guardName", min_length=1, max_length=100
    )
    guard_class: Optional[str] = Field(
        default=None, alias="guardClass", min_length=1, max_length=10
    )
    guard_phone: Optional[str] = Field(
        default=None, alias="guardPhone", max_length=20, pattern=PHONE_PATTERN
    )
    brings_phone: Optional[YesNo] = Field(default=None, alias="bringsPhone")
    willing_to_help: Optional[YesNo] = Field(default=None, alias="willingToHelp")


Submission = Union[PlayerSubmission, GuardSubmission]

SUBMISSION_MODELS: dict[RegistrationRole, type[_SubmissionBase]] = {
    RegistrationRole.PLAYER: PlayerSubmission,
    RegistrationRole.GUARD: GuardSubmission,
}
