"""Configuration object accepted by Credentials.parse()."""

import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CredentialsConfig(BaseModel):
    """Credential settings as supplied by a mapping or built in code.

    Keys may be given in camelCase (``apiKey``) or snake_case (``api_key``).
    Unrecognized keys are ignored. Secret values are left out of repr().
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        arbitrary_types_allowed=True,
    )

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    api_secret: Optional[str] = Field(default=None, alias="apiSecret", repr=False)
    application_id: Optional[str] = Field(default=None, alias="applicationId")
    private_key: Optional[Union[bytes, str, os.PathLike]] = Field(
        default=None, alias="privateKey", repr=False
    )
    signature_secret: Optional[str] = Field(
        default=None, alias="signatureSecret", repr=False
    )
    signature_method: Optional[str] = Field(default=None, alias="signatureMethod")
