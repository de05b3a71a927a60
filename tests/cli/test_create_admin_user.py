# tests/cli/test_create_admin_user.py
import pytest
from sqlalchemy.orm import Session, sessionmaker

from app.crud import crud_user
from scripts import create_admin_user


@pytest.fixture
def cli(db_session: Session, mocker):
    """Points the script at the test database."""
    bind = db_session.get_bind()
    mocker.patch.object(create_admin_user, "engine", bind)
    mocker.patch.object(create_admin_user, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=bind))
    return create_admin_user.main


def test_creates_new_admin(cli, db_session: Session, capsys):
    assert cli(["new@example.com", "pw-123", "--name", "New Admin"]) == 0

    user = crud_user.get_user_by_email(db_session, email="new@example.com")
    assert user is not None
    assert user.full_name == "New Admin"
    assert crud_user.authenticate(db_session, "new@example.com", "pw-123") is not None
    assert "Created admin new@example.com" in capsys.readouterr().out

def test_resets_password_of_existing_admin(cli, db_session: Session, admin_user, admin_password, capsys):
    assert cli([admin_user.email, "brand-new-pw"]) == 0

    db_session.expire_all()
    assert crud_user.authenticate(db_session, admin_user.email, "brand-new-pw") is not None
    assert crud_user.authenticate(db_session, admin_user.email, admin_password) is None
    assert f"Password updated for {admin_user.email}." in capsys.readouterr().out

def test_prompts_for_password_when_omitted(cli, db_session: Session, mocker):
    prompt = mocker.patch.object(create_admin_user.getpass, "getpass", return_value="typed-pw")

    assert cli(["prompted@example.com"]) == 0

    prompt.assert_called_once()
    assert crud_user.authenticate(db_session, "prompted@example.com", "typed-pw") is not None

def test_empty_password_is_rejected(cli, db_session: Session, mocker):
    mocker.patch.object(create_admin_user.getpass, "getpass", return_value="")

    assert cli(["empty@example.com"]) == 1
    assert crud_user.get_user_by_email(db_session, email="empty@example.com") is None
