#!/usr/bin/env python3
"""
Create Admin User Script.

Bootstraps an administrator: ensures the admin role exists, creates the
user through the access-management workflow and assigns the role.
Useful for initial setup when no admin exists.

Usage:
    python auto/create_admin.py --email admin@example.com --password Secret123

Environment Variables:
    ADMIN_EMAIL: Admin email (default: admin@example.com)
    ADMIN_PASSWORD: Admin password (default: auto-generated)
    ADMIN_USERNAME: Admin username (default: admin)
    ADMIN_ROLE: Role name to grant (default: admin)
"""

from argparse import ArgumentParser, Namespace
from asyncio import run as asyncio_run
from dataclasses import dataclass
from os import environ
from secrets import token_urlsafe
from sys import exit as sys_exit
from uuid import UUID

from smartops.configs import get_settings
from smartops.db import Database
from smartops.errors import BaseAppError
from smartops.managers import PasswordHasher
from smartops.repositories import Repositories
from smartops.schemas import RoleCreate, UserCreate, UserResponse
from smartops.services import AccessManagementService


@dataclass(frozen=True)
class AdminUserData:
    """
    Admin user creation data.

    Attributes
    ----------
    email : str
        Admin email address.
    password : str
        Admin password (will be hashed).
    username : str
        Admin username.
    role : str
        Name of the role granted to the admin.
    """

    email: str
    password: str
    username: str
    role: str


class _LocalSessions:
    """Token issuer for the bootstrap run; nothing outlives the script."""

    async def issue(self, user_id: UUID) -> str:
        return token_urlsafe(32)

    async def revoke(self, token: str) -> None:
        return None


def generate_secure_password(length: int = 16) -> str:
    """Generate a secure random password."""
    password = token_urlsafe(length)
    return f"Admin{password[:12]}!1"


def parse_args() -> Namespace:
    parser = ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", default=environ.get("ADMIN_EMAIL", "admin@example.com"))
    parser.add_argument("--password", default=environ.get("ADMIN_PASSWORD"))
    parser.add_argument("--username", default=environ.get("ADMIN_USERNAME", "admin"))
    parser.add_argument("--role", default=environ.get("ADMIN_ROLE", "admin"))
    return parser.parse_args()


async def create_admin_user(admin_data: AdminUserData) -> UserResponse:
    """
    Create the admin user and grant the admin role in one transaction.

    Raises
    ------
    ConflictError
        If the username or email is already taken.
    """
    settings = get_settings()
    database = Database(settings)
    hasher = PasswordHasher(settings)
    try:
        async with database.transaction() as session:
            repos = Repositories.from_session(session)
            service = AccessManagementService(repos, hasher, _LocalSessions(), settings)

            role = await repos.roles.get_by_name(admin_data.role)
            if role is None:
                role = await service.create_role(RoleCreate(name=admin_data.role))

            auth = await service.register_user(
                UserCreate(
                    username=admin_data.username,
                    email=admin_data.email,
                    password=admin_data.password,
                ),
            )
            if not await repos.user_roles.exists(auth.user.id, role.id):
                await service.assign_role(auth.user.id, role.id)
            return auth.user
    finally:
        hasher.shutdown()
        await database.dispose()


def main() -> None:
    args = parse_args()
    auto_generated = args.password is None
    admin_data = AdminUserData(
        email=args.email,
        password=args.password or generate_secure_password(),
        username=args.username,
        role=args.role,
    )

    try:
        admin = asyncio_run(create_admin_user(admin_data))
    except BaseAppError as e:
        print(f"❌ {e.detail}")
        sys_exit(1)

    print("✅ Admin user created successfully!")
    print(f"   ID:    {admin.id}")
    print(f"   Email: {admin.email}")
    print(f"   Role:  {admin_data.role}")
    if auto_generated:
        print(f"   Password: {admin_data.password}")
        print("⚠️  This password was auto-generated. Save it now!")


if __name__ == "__main__":
    main()
