from __future__ import annotations

import pytest

from userapi.core.config import Settings
from userapi.core.exceptions import ConflictError, InternalError, NotFoundError, ValidationError
from userapi.core.security import make_pwd_context, verify_password
from userapi.models.user import User
from userapi.repositories.user_repository import NotFoundOnWrite, StoreError, UniqueViolation
from userapi.schemas.user import UserCreate, UserUpdate
from userapi.services.users import UserService


class FakeUserRepo:
    def __init__(self):
        self._next_id = 1
        self._rows: dict[int, User] = {}
        self.writes = 0
        self.last_take = None
        self.fail_next_write: StoreError | None = None

    def _maybe_fail(self):
        if self.fail_next_write is not None:
            err, self.fail_next_write = self.fail_next_write, None
            raise err

    def get_by_id(self, user_id):
        return self._rows.get(user_id)

    def get_by_username(self, username):
        return next((u for u in self._rows.values() if u.username == username), None)

    def list(self, *, skip, take):
        self.last_take = take
        return [self._rows[k] for k in sorted(self._rows)][skip : skip + take]

    def create(self, **columns):
        self._maybe_fail()
        self.writes += 1
        user = User(id=self._next_id, **columns)
        self._rows[self._next_id] = user
        self._next_id += 1
        return user

    def update(self, user, changes):
        self._maybe_fail()
        self.writes += 1
        for k, v in changes.items():
            setattr(user, k, v)
        return user

    def delete_by_id(self, user_id):
        self._maybe_fail()
        self.writes += 1
        if self._rows.pop(user_id, None) is None:
            raise NotFoundOnWrite(str(user_id))


PWD = make_pwd_context(1000)


@pytest.fixture()
def repo():
    return FakeUserRepo()


@pytest.fixture()
def service(repo):
    cfg = Settings()
    return UserService(repo, PWD, default_take=cfg.default_take, max_take=cfg.max_take)


def _create(service, username="alice", password="pw1", role="admin", **extra):
    return service.create_user(
        UserCreate.model_validate({"username": username, "password": password, "userrole": role, **extra})
    )


def test_create_hashes_password_and_sanitizes(service, repo):
    out = _create(service)

    assert out.id == 1
    assert "password" not in out.model_dump(by_alias=True)
    assert "password_hash" not in out.model_dump()

    stored = repo.get_by_id(1)
    assert stored.password_hash != "pw1"
    assert verify_password("pw1", stored.password_hash, PWD)


@pytest.mark.parametrize(
    "fields",
    [
        {"password": "pw", "userrole": "admin"},
        {"username": "alice", "userrole": "admin"},
        {"username": "alice", "password": "pw"},
        {"username": "", "password": "pw", "userrole": "admin"},
    ],
)
def test_create_requires_username_password_role(service, repo, fields):
    with pytest.raises(ValidationError):
        service.create_user(UserCreate.model_validate(fields))
    assert repo.writes == 0


def test_create_duplicate_username(service, repo):
    _create(service)
    with pytest.raises(ConflictError):
        _create(service, password="other")
    assert repo.writes == 1


def test_create_store_unique_violation_is_conflict(service, repo):
    # another request won the race after our pre-check
    repo.fail_next_write = UniqueViolation("UNIQUE constraint failed: users.username")
    with pytest.raises(ConflictError):
        _create(service)


def test_create_other_store_failure_is_internal(service, repo):
    repo.fail_next_write = StoreError("disk I/O error")
    with pytest.raises(InternalError):
        _create(service)


def test_create_parses_request_date(service):
    out = _create(service, requestDate="2024-03-07T10:15:00+02:00")
    assert out.request_date.isoformat() == "2024-03-07T08:15:00"

    with pytest.raises(ValidationError):
        _create(service, username="bob", requestDate="not-a-date")


def test_list_clamps_take(service, repo):
    for i in range(3):
        _create(service, username=f"u{i}")

    assert len(service.list_users(skip=0, take=5000)) == 3
    assert repo.last_take == 1000

    service.list_users()
    assert repo.last_take == 100

    service.list_users(skip=-5, take=-1)
    assert repo.last_take == 100

    assert [u.username for u in service.list_users(skip=1, take=1)] == ["u1"]


def test_get_validates_id(service):
    created = _create(service)

    assert service.get_user(str(created.id)).username == "alice"
    with pytest.raises(ValidationError):
        service.get_user("one")
    with pytest.raises(NotFoundError):
        service.get_user(42)


def test_update_without_username_keeps_it(service):
    created = _create(service)

    out = service.update_user(created.id, UserUpdate.model_validate({"userrole": "manager"}))
    assert out.username == "alice"
    assert out.role == "manager"
    assert out.id == created.id


def test_update_to_taken_username_conflicts(service, repo):
    _create(service, username="alice")
    bob = _create(service, username="bob")

    with pytest.raises(ConflictError):
        service.update_user(bob.id, UserUpdate.model_validate({"username": "alice"}))
    assert repo.get_by_id(bob.id).username == "bob"


def test_update_bad_date_writes_nothing(service, repo):
    created = _create(service)
    writes = repo.writes

    with pytest.raises(ValidationError):
        service.update_user(
            created.id,
            UserUpdate.model_validate({"userrole": "manager", "requestDate": "not-a-date"}),
        )
    assert repo.writes == writes
    assert repo.get_by_id(created.id).role == "admin"


def test_update_empty_password_keeps_hash(service, repo):
    created = _create(service)
    before = repo.get_by_id(created.id).password_hash

    service.update_user(created.id, UserUpdate.model_validate({"password": ""}))
    assert repo.get_by_id(created.id).password_hash == before

    service.update_user(created.id, UserUpdate.model_validate({"password": "new"}))
    after = repo.get_by_id(created.id).password_hash
    assert after != before
    assert verify_password("new", after, PWD)


def test_update_missing_user(service):
    with pytest.raises(NotFoundError):
        service.update_user(7, UserUpdate.model_validate({"userrole": "x"}))
    with pytest.raises(ValidationError):
        service.update_user("x7", UserUpdate())


def test_delete(service, repo):
    created = _create(service)

    service.delete_user(str(created.id))
    assert repo.get_by_id(created.id) is None

    with pytest.raises(NotFoundError):
        service.delete_user(created.id)
    with pytest.raises(ValidationError):
        service.delete_user("abc")


def test_update_changes_tracks_supplied_fields():
    data = UserUpdate.model_validate({"username": "a", "approverName": None, "employeecode": ""})
    assert data.changes() == {"username": "a"}
    assert UserUpdate().changes() == {}


def test_whitespace_values_are_not_empty(service, repo):
    out = _create(service, username="  ", password="   ")
    assert out.username == "  "
    assert verify_password("   ", repo.get_by_id(out.id).password_hash, PWD)

    bob = _create(service, username="bob")
    renamed = service.update_user(bob.id, UserUpdate.model_validate({"username": " b "}))
    assert renamed.username == " b "


def test_falsy_request_date_means_unchanged(service):
    created = _create(service, requestDate=0)
    assert created.request_date is None

    dated = _create(service, username="bob", requestDate="2024-03-07")
    out = service.update_user(dated.id, UserUpdate.model_validate({"requestDate": 0}))
    assert out.request_date.isoformat() == "2024-03-07T00:00:00"

    out = service.update_user(dated.id, UserUpdate.model_validate({"requestDate": False}))
    assert out.request_date.isoformat() == "2024-03-07T00:00:00"


def test_list_huge_skip_is_capped(service, repo):
    _create(service)
    assert service.list_users(skip=10**30, take=5) == []
    assert repo.last_take == 5
