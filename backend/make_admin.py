#!/usr/bin/env python3
"""
Script to change a user's role, account type or organization.

Users are provisioned as client/team_member with no organization on their
first login; this is how they get promoted or attached to an organization.

Usage:
    python make_admin.py alice@example.com
    python make_admin.py bob@example.com --role staff
    python make_admin.py carol@example.com --role client --account-type team_lead --organization <org_id>
"""
import argparse
import asyncio
import sys
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import AsyncSessionLocal, engine
from app.models.organization import Organization
from app.models.user import AccountType, User, UserRole


async def update_user(
    db: AsyncSession,
    email: str,
    role: str,
    account_type: Optional[str] = None,
    organization_id: Optional[str] = None,
) -> Optional[User]:
    """Apply the changes to the user with this email. Returns None if absent."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        return None

    if organization_id:
        org = await db.get(Organization, organization_id)
        if org is None:
            raise ValueError(f"Organization {organization_id} not found")
        user.organization_id = org.id

    user.role = role
    if account_type:
        user.account_type = account_type

    await db.commit()
    await db.refresh(user)
    return user


async def run(email, role, account_type=None, organization_id=None) -> Optional[User]:
    try:
        async with AsyncSessionLocal() as db:
            return await update_user(db, email, role, account_type, organization_id)
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description='Promote a portal user')
    parser.add_argument('email', help='Email of an existing user (they must have logged in once)')
    parser.add_argument('--role', default=UserRole.ADMIN.value,
                        choices=[r.value for r in UserRole])
    parser.add_argument('--account-type', choices=[a.value for a in AccountType])
    parser.add_argument('--organization', help='Organization id to attach the user to')
    args = parser.parse_args()

    try:
        user = asyncio.run(run(args.email, args.role, args.account_type, args.organization))
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if user is None:
        print(f"ERROR: No user with email {args.email}")
        sys.exit(1)

    print(f"Updated {user.email}: role={user.role} account_type={user.account_type} "
          f"organization={user.organization_id or '-'}")


if __name__ == '__main__':
    main()
