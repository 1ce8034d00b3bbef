import asyncio
import typer
from sqlalchemy.ext.asyncio import AsyncSession

import newsroom.db_models # noqa: F401

from newsroom.database import Base, async_session_factory, engine
from newsroom.exceptions import InvalidInput
from newsroom.users.models import Role, User as UserModel # 타입 힌트를 위해 임포트
from newsroom.users.service import create_user

cli = typer.Typer()

async def create_user_runner(username: str, email: str, password: str, role: Role, db: AsyncSession) -> None:
    """비동기 로직을 실행하는 실제 러너 함수"""
    print(f"Creating {role.value} user '{email}'...")
    try:
        user: UserModel = await create_user(db, email=email, username=username, password=password, role=role)
    except InvalidInput as e:
        print(f"\n❌ Error creating user: {e.detail}")
        raise typer.Exit(code=1)

    print("\n✅ User created successfully!")
    print(f"   ID: {user.id}")
    print(f"   Email: {user.email}")
    print(f"   Role: {user.role.value}")


@cli.command(name="create-user")
def createuser(
    username: str = typer.Option(..., "--username", "-u", help="Display name."),
    email: str = typer.Option(..., "--email", "-e", help="E-mail address used to log in."),
    password: str = typer.Option(..., "--password", "-p", help="Password (min. 6 characters)."),
    role: Role = typer.Option(Role.EDITOR, "--role", "-r", help="USER, JOURNALIST or EDITOR."),
):
    """
    Creates a user with any role. Used to bootstrap the first EDITOR account.
    """
    if len(password) < 6:
        print("❌ Password must be at least 6 characters")
        raise typer.Exit(code=1)

    async def main():
        async with async_session_factory() as session:
            await create_user_runner(username=username, email=email, password=password, role=role, db=session)
        await engine.dispose()

    asyncio.run(main())


@cli.command(name="create-tables")
def create_tables():
    """
    Creates all tables directly from the models (local development only; use alembic elsewhere).
    """
    async def main():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await engine.dispose()

    asyncio.run(main())
    print("✅ Tables created")


if __name__ == "__main__":
    cli()
