"""Accounts GraphQL API: signup, login, profile and email verification."""
import dataclasses

import strawberry
from pydantic import BaseModel, ValidationError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info
from starlette.concurrency import run_in_threadpool

from app import schemas
from app.dependencies import AuthGuard, Context, get_context
from app.schemas.types import (
    CoreOutput,
    CreateAccountInput,
    CreateAccountOutput,
    EditProfileInput,
    EditProfileOutput,
    LoginInput,
    LoginOutput,
    UserProfileOutput,
    UserType,
    VerifyEmailInput,
    VerifyEmailOutput,
)
from app.services import users as account_service


def _validation_message(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ()))
    return f"{field}: {err['msg']}" if field else err["msg"]


def _parse(model: type[BaseModel], data) -> BaseModel:
    return model(**dataclasses.asdict(data))


# Service calls hash passwords and hit the database; keep them off the event loop.
@strawberry.type
class Query:
    @strawberry.field
    async def me(self, info: Info[Context, None]) -> UserType:
        user = await run_in_threadpool(schemas.UserResponse.model_validate, info.context.user)
        return UserType.from_response(user)

    @strawberry.field
    async def user_profile(self, info: Info[Context, None], user_id: int) -> UserProfileOutput:
        output = await run_in_threadpool(account_service.find_by_id, info.context.db, user_id)
        return UserProfileOutput(
            ok=output.ok,
            error=output.error,
            user=UserType.from_response(output.user) if output.user else None,
        )


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_account(self, info: Info[Context, None], input: CreateAccountInput) -> CreateAccountOutput:
        try:
            data = _parse(schemas.CreateAccountInput, input)
        except ValidationError as e:
            return CreateAccountOutput(ok=False, error=_validation_message(e))
        output = await run_in_threadpool(
            account_service.create_account,
            info.context.db,
            info.context.background_tasks,
            data,
        )
        return CreateAccountOutput(**output.model_dump())

    @strawberry.mutation
    async def login(self, info: Info[Context, None], input: LoginInput) -> LoginOutput:
        try:
            data = _parse(schemas.LoginInput, input)
        except ValidationError as e:
            return LoginOutput(ok=False, error=_validation_message(e))
        output = await run_in_threadpool(account_service.login, info.context.db, data)
        return LoginOutput(**output.model_dump())

    @strawberry.mutation
    async def edit_profile(self, info: Info[Context, None], input: EditProfileInput) -> EditProfileOutput:
        try:
            data = _parse(schemas.EditProfileInput, input)
        except ValidationError as e:
            return EditProfileOutput(ok=False, error=_validation_message(e))
        output = await run_in_threadpool(
            account_service.edit_profile,
            info.context.db,
            info.context.background_tasks,
            info.context.user.id,
            data,
        )
        return EditProfileOutput(**output.model_dump())

    @strawberry.mutation
    async def verify_email(self, info: Info[Context, None], input: VerifyEmailInput) -> VerifyEmailOutput:
        output = await run_in_threadpool(
            account_service.verify_email,
            info.context.db,
            _parse(schemas.VerifyEmailInput, input),
        )
        return VerifyEmailOutput(**output.model_dump())

    @strawberry.mutation
    async def resend_verification(self, info: Info[Context, None]) -> CoreOutput:
        output = await run_in_threadpool(
            account_service.resend_verification,
            info.context.db,
            info.context.background_tasks,
            info.context.user.id,
        )
        return CoreOutput(**output.model_dump())


schema = strawberry.Schema(query=Query, mutation=Mutation, extensions=[AuthGuard])

router = GraphQLRouter(schema, context_getter=get_context)
