import pytest

from app.core.security import AUTH_CODE_PREFIX, consume_auth_code, issue_auth_code


@pytest.mark.asyncio
async def test_auth_code_redeems_once(fake_redis):
    code = await issue_auth_code(fake_redis, 42)

    assert fake_redis.store[f"{AUTH_CODE_PREFIX}{code}"] == "42"
    assert await consume_auth_code(fake_redis, code) == 42
    assert await consume_auth_code(fake_redis, code) is None


@pytest.mark.asyncio
async def test_unknown_auth_code(fake_redis):
    assert await consume_auth_code(fake_redis, "missing") is None
