from unittest.mock import AsyncMock, MagicMock

import pytest

from src.core.exceptions import InvalidCredentialsError
from src.domain.events.authentication_events import UserLoggedInEvent
from src.domain.interfaces.repositories import IUserRepository
from src.domain.interfaces.services import IEventDispatcher
from src.domain.services.auth.user_authentication import LoginContext, UserAuthenticationService
from tests.factories.user import create_fake_user


@pytest.fixture
def repo():
    return AsyncMock(spec=IUserRepository)


@pytest.fixture
def dispatcher():
    dispatcher = MagicMock(spec=IEventDispatcher)
    dispatcher.dispatch.return_value = True
    return dispatcher


@pytest.fixture
def service(repo, dispatcher):
    return UserAuthenticationService(repo, dispatcher)


@pytest.mark.asyncio
async def test_valid_credentials_return_user(service, repo):
    # Arrange
    user = create_fake_user(username="alice", password="Str0ng!Passw0rd")
    repo.get_by_username.return_value = user

    # Act
    result = await service.authenticate_by_credentials("alice", "Str0ng!Passw0rd")

    # Assert
    assert result is user
    repo.get_by_username.assert_awaited_once_with("alice")


@pytest.mark.asyncio
async def test_wrong_password(service, repo):
    repo.get_by_username.return_value = create_fake_user(password="Str0ng!Passw0rd")

    with pytest.raises(InvalidCredentialsError):
        await service.authenticate_by_credentials("alice", "wrong")


@pytest.mark.asyncio
async def test_unknown_user_gets_the_same_error(service, repo, mocker):
    repo.get_by_username.return_value = None
    dummy = mocker.patch("src.domain.services.auth.user_authentication.dummy_verify")

    with pytest.raises(InvalidCredentialsError) as unknown:
        await service.authenticate_by_credentials("ghost", "whatever")

    dummy.assert_called_once()
    repo.get_by_username.return_value = create_fake_user(password="Str0ng!Passw0rd")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await service.authenticate_by_credentials("alice", "whatever")
    assert str(unknown.value) == str(wrong.value)


@pytest.mark.asyncio
async def test_inactive_user_cannot_log_in(service, repo):
    repo.get_by_username.return_value = create_fake_user(password="Str0ng!Passw0rd", is_active=False)

    with pytest.raises(InvalidCredentialsError):
        await service.authenticate_by_credentials("alice", "Str0ng!Passw0rd")


@pytest.mark.asyncio
async def test_error_message_is_translated(service, repo):
    repo.get_by_username.return_value = None

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await service.authenticate_by_credentials("ghost", "whatever", language="es")

    assert exc_info.value.message != "invalid credentials"


def test_record_login_dispatches_activity_event(service, dispatcher):
    user = create_fake_user(username="alice")
    context = LoginContext(ip_address="10.0.0.7", user_agent="curl/8.0", correlation_id="req-9")

    assert service.record_login(user, "jti-123", context) is True

    event = dispatcher.dispatch.call_args.args[0]
    assert isinstance(event, UserLoggedInEvent)
    assert event.user_id == str(user.id)
    assert event.session_id == "jti-123"
    assert event.as_dict()["event_type"] == "LOGIN"
    assert event.as_dict()["metadata"] == {
        "ip_address": "10.0.0.7",
        "user_agent": "curl/8.0",
        "username": "alice",
    }
    assert event.correlation_id == "req-9"


def test_record_login_without_session_id(service, dispatcher):
    service.record_login(create_fake_user(), None)

    assert dispatcher.dispatch.call_args.args[0].session_id == UserLoggedInEvent.NO_SESSION


def test_dropped_login_event_is_reported_not_raised(service, dispatcher):
    dispatcher.dispatch.return_value = False

    assert service.record_login(create_fake_user(), "jti-1") is False


def test_record_login_without_dispatcher(repo):
    assert UserAuthenticationService(repo).record_login(create_fake_user(), "jti-1") is False
