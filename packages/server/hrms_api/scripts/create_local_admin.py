"""
Script to register an organisation and its administrator for local testing.

Goes through the same registration path as the API, so the usual validation
and audit entry apply.
"""

import argparse
import asyncio
import sys

from hrms_api.core.auth import get_token_service
from hrms_api.core.database import async_session_factory, dispose_engine, init_db
from hrms_api.core.errors import HRMSError
from hrms_api.services import auth as auth_service
from hrms_shared.schemas.auth import RegisterRequest


async def create_admin(org_name: str, admin_name: str, email: str, password: str) -> int:
    await init_db()
    body = RegisterRequest(
        org_name=org_name, admin_name=admin_name, email=email, password=password
    )
    try:
        async with async_session_factory() as session:
            try:
                result = await auth_service.register(body, get_token_service(), session)
            except HRMSError as exc:
                print(f"Error: {exc.message}", file=sys.stderr)
                return 1
    finally:
        await dispose_engine()

    print(f"Created organisation '{result.organisation.name}' ({result.organisation.id}).")
    print(f"Created admin {result.user.email} ({result.user.id}).")
    print(f"Token: {result.token}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a local organisation admin.")
    parser.add_argument("--org-name", required=True, help="Organisation name")
    parser.add_argument("--admin-name", required=True, help="Administrator's display name")
    parser.add_argument("--email", required=True, help="Email address for the admin")
    parser.add_argument("--password", required=True, help="Password for the admin")

    args = parser.parse_args()

    sys.exit(
        asyncio.run(create_admin(args.org_name, args.admin_name, args.email, args.password))
    )


if __name__ == "__main__":
    main()
