# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

import asyncio
import logging
import re
from typing import Annotated, List

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from paramguard import ValidationError, Validator, describe_parameter, validate

# Basic logging setup
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class SignupDto(BaseModel):
    email: str
    display_name: str = Field(min_length=3)

    @field_validator("email")
    @classmethod
    def _is_email(cls, value: str) -> str:
        if not _EMAIL.match(value):
            raise PydanticCustomError("isEmail", "email must be an email")
        return value


class AccountService:

    # 1. Schema inferred from the annotation
    @validate
    def signup(self, body: Annotated[SignupDto, Validator()]):
        return f"Welcome, {body['display_name']}!"

    # 2. Schema given explicitly, value looked up under "body" in the request
    @validate
    def signup_from_request(self, request: Annotated[dict, Validator(SignupDto, "body")]):
        return f"Welcome, {request['body']['display_name']}!"

    # 3. Every element of a list validated on its own
    @validate
    def bulk_signup(self, rows: Annotated[List[SignupDto], Validator()]):
        return f"Imported {len(rows)} accounts"

    # 4. Markers supplied without touching the annotations, on an async method
    @validate(parameters=[describe_parameter("body", SignupDto)])
    async def signup_async(self, body):
        await asyncio.sleep(0.05)
        return f"Welcome, {body['display_name']}!"


def report(label, call):
    try:
        logging.info("%s -> %s", label, call())
    except ValidationError as error:
        for violation in error.validation_errors:
            logging.warning("%s -> %s: %s", label, violation.property, dict(violation.constraints))


async def main():
    service = AccountService()

    report("signup ok", lambda: service.signup({"email": "ada@example.com", "display_name": "Ada"}))
    report("signup bad email", lambda: service.signup({"email": "ada", "display_name": "Ada"}))
    report("request without body", lambda: service.signup_from_request({"email": "ada@example.com"}))
    report("bulk with scalar", lambda: service.bulk_signup({"email": "ada@example.com"}))
    report(
        "bulk with one bad row",
        lambda: service.bulk_signup(
            [{"email": "ada@example.com", "display_name": "Ada"}, {"email": "bob", "display_name": "B"}]
        ),
    )

    try:
        logging.info("async -> %s", await service.signup_async({"email": "eve@example.com", "display_name": "Eve"}))
        await service.signup_async({"email": "eve"})
    except ValidationError as error:
        logging.warning("async rejected:\n%s", error)


if __name__ == "__main__":
    asyncio.run(main())
