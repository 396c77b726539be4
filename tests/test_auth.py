from __future__ import annotations

import asyncio

import httpx
import pytest

from rebrick import NO_RESULT, AuthenticationError, AuthState, TransportError

TOKEN = "a" * 64


@pytest.mark.asyncio
async def test_login_exchanges_credentials_for_token(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})

    assert rebrick.auth.state is AuthState.ANONYMOUS
    assert await rebrick.auth.login() is True

    assert rebrick.credentials.user_token == TOKEN
    assert rebrick.auth.state is AuthState.AUTHENTICATED
    (call,) = fake_api.calls
    assert fake_api.form(call) == {"username": "builder", "password": "s3cret"}
    assert call.headers["Authorization"] == "Key test-api-key"


@pytest.mark.asyncio
async def test_login_twice_performs_one_exchange(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})

    await rebrick.login()
    await rebrick.login()

    assert len(fake_api.calls_to("POST", "users/_token")) == 1
    assert rebrick.is_authenticated


@pytest.mark.asyncio
async def test_concurrent_logins_share_one_exchange(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})

    results = await asyncio.gather(*(rebrick.auth.login() for _ in range(5)))

    assert results == [True] * 5
    assert len(fake_api.calls_to("POST", "users/_token")) == 1


@pytest.mark.asyncio
async def test_supplied_token_is_never_replaced_by_password_login(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret", user_token="given-token")
    fake_api.add("GET", "users/given-token/profile", {"username": "builder"})

    assert rebrick.auth.state is AuthState.AUTHENTICATED
    await rebrick.login()
    profile = await rebrick.users.get_profile()

    assert profile == {"username": "builder"}
    assert rebrick.credentials.user_token == "given-token"
    assert fake_api.calls_to("POST", "users/_token") == []


@pytest.mark.asyncio
async def test_login_arguments_fill_missing_credentials(make_client, fake_api) -> None:
    rebrick = make_client()
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})

    await rebrick.login("builder", "s3cret")

    assert rebrick.credentials.username == "builder"
    assert rebrick.users.token == TOKEN


@pytest.mark.asyncio
async def test_stored_credentials_take_precedence_over_arguments(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})

    await rebrick.login("someone-else", "other")

    (call,) = fake_api.calls
    assert fake_api.form(call)["username"] == "builder"


@pytest.mark.asyncio
async def test_login_without_credentials_raises(rebrick, fake_api) -> None:
    with pytest.raises(AuthenticationError):
        await rebrick.auth.login()

    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_rejected_login_leaves_token_absent_and_retries(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="wrong")
    fake_api.add("POST", "users/_token", {"detail": "invalid credentials"}, status=400)

    assert await rebrick.auth.login() is False
    assert rebrick.credentials.user_token is None
    assert rebrick.auth.state is AuthState.ANONYMOUS

    assert await rebrick.users.get_sets() is NO_RESULT
    assert await rebrick.users.get_part_lists() is NO_RESULT

    assert len(fake_api.calls_to("POST", "users/_token")) == 3
    assert len(fake_api.calls) == 3


@pytest.mark.asyncio
async def test_force_login_exchanges_again(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})
    await rebrick.auth.login()

    fake_api.add("POST", "users/_token", {"user_token": "b" * 64})
    assert await rebrick.auth.login(force=True) is True

    assert rebrick.credentials.user_token == "b" * 64
    assert len(fake_api.calls_to("POST", "users/_token")) == 2


@pytest.mark.asyncio
async def test_get_token_returns_sentinel_on_error(make_client, fake_api) -> None:
    rebrick = make_client()
    fake_api.add("POST", "users/_token", {"detail": "invalid credentials"}, status=400)

    assert await rebrick.auth.get_token("builder", "wrong") is NO_RESULT


@pytest.mark.asyncio
async def test_rejected_forced_login_keeps_current_token(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret", user_token="given-token")
    fake_api.add("POST", "users/_token", {"detail": "invalid credentials"}, status=400)

    assert await rebrick.auth.login(force=True) is False

    assert rebrick.credentials.user_token == "given-token"
    assert rebrick.auth.state is AuthState.AUTHENTICATED
    assert len(fake_api.calls_to("POST", "users/_token")) == 1


@pytest.mark.asyncio
async def test_forced_login_transport_failure_keeps_current_token(make_client, fake_api) -> None:
    rebrick = make_client(username="builder", password="s3cret")
    fake_api.add("POST", "users/_token", {"user_token": TOKEN})
    await rebrick.auth.login()

    fake_api.fail("POST", "users/_token", httpx.ConnectError("connection refused"))
    with pytest.raises(TransportError):
        await rebrick.auth.login(force=True)

    assert rebrick.credentials.user_token == TOKEN
    assert rebrick.auth.state is AuthState.AUTHENTICATED
