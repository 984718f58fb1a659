# wallet/api/auth.py
# Sign-up / sign-in against the backend; the token lands in the AuthSession.

from __future__ import annotations

from typing import Any, List, Mapping, Union

from wallet.api.base import Resource, payload
from wallet.models import (
    AuthResponse,
    AuthUser,
    ChangePasswordInput,
    Created,
    CreateUserInput,
    LoginInput,
    Message,
    RegisterInput,
    User,
    parse_record,
    parse_records,
)


class AuthApi(Resource):
    def register(self, data: Union[RegisterInput, Mapping[str, Any]]) -> AuthResponse:
        body = payload(RegisterInput, data)
        resp = parse_record(AuthResponse, self.client.post("/auth/register", body))
        self.client.session.login(resp.token, resp.user)
        return resp

    def login(self, data: Union[LoginInput, Mapping[str, Any]]) -> AuthResponse:
        body = payload(LoginInput, data)
        resp = parse_record(AuthResponse, self.client.post("/auth/login", body))
        self.client.session.login(resp.token, resp.user)
        return resp

    def logout(self) -> None:
        # tokens are stateless on the server; forgetting it is enough
        self.client.session.logout()

    def me(self) -> AuthUser:
        return parse_record(AuthUser, self.client.get("/auth/me"))

    def change_password(
        self, data: Union[ChangePasswordInput, Mapping[str, Any]]
    ) -> Message:
        body = payload(ChangePasswordInput, data)
        return parse_record(Message, self.client.put("/auth/password", body))


class UsersApi(Resource):
    def create(self, data: Union[CreateUserInput, Mapping[str, Any]]) -> Created:
        body = payload(CreateUserInput, data)
        return parse_record(Created, self.client.post("/users", body))

    def get(self, user_id: int) -> User:
        return parse_record(User, self.client.get(f"/users/{user_id}"))

    def list(self) -> List[User]:
        return parse_records(User, self.client.get("/users"))
