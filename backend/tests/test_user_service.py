from __future__ import annotations

from papervault.domain.enums import Grade, Role
from papervault.errors import Conflict, NotFound, PermissionDenied
from papervault.services.suggestion_service import SuggestionService
from papervault.services.user_service import UserService


def test_sign_up_and_sign_in(session):
    svc = UserService(session)
    user = svc.sign_up("Lee", "Lee@Example.com", Role.HIGH_SCHOOL, Grade.GRADE_10).unwrap()

    assert user.email == "lee@example.com"
    assert user.grade is Grade.GRADE_10
    assert svc.sign_in("lee@example.com").unwrap().id == user.id


def test_sign_up_rules(session, student):
    svc = UserService(session)
    assert isinstance(svc.sign_up("Eve", "eve@example.com", Role.ADMIN).error, PermissionDenied)
    assert isinstance(svc.sign_up("Sam", student.email, Role.COLLEGE).error, Conflict)
    assert svc.sign_up("Uma", "uma@example.com", Role.UNIVERSITY, Grade.GRADE_12).unwrap().grade is None


def test_sign_in_unknown_email(session):
    assert isinstance(UserService(session).sign_in("ghost@example.com").error, NotFound)


def test_profile_update_switches_role_and_clears_grade(session, student):
    updated = UserService(session).update_profile(student.id, name="Sam S.", role=Role.COLLEGE).unwrap()
    assert (updated.name, updated.role, updated.grade) == ("Sam S.", Role.COLLEGE, None)


def test_profile_update_cannot_grant_or_drop_admin(session, student, admin):
    svc = UserService(session)
    assert isinstance(svc.update_profile(student.id, role=Role.ADMIN).error, PermissionDenied)
    assert isinstance(svc.update_profile(admin.id, role=Role.COLLEGE).error, PermissionDenied)
    assert svc.update_profile(admin.id, name="Ada L.").unwrap().role is Role.ADMIN


def test_only_admins_manage_roles(session, student, admin):
    svc = UserService(session)
    assert isinstance(svc.set_role(student, admin.id, Role.COLLEGE).error, PermissionDenied)
    promoted = svc.set_role(admin, student.id, Role.ADMIN).unwrap()
    assert promoted.role is Role.ADMIN and promoted.grade is None
    assert isinstance(svc.list_users(student).error, PermissionDenied)
    assert {u.id for u in svc.list_users(admin).unwrap()} == {student.id, admin.id}


def test_viewer_carries_bookmarks(session, student, make_paper):
    from papervault.services.bookmark_service import BookmarkService

    paper = make_paper()
    BookmarkService(session).toggle_bookmark(paper.id, student.id).unwrap()
    viewer = UserService(session).viewer_for(student.id)
    assert viewer.role is Role.HIGH_SCHOOL
    assert viewer.bookmarks == {paper.id}
    assert UserService(session).viewer_for(None).is_anonymous


def test_suggestions_inbox(session, student, admin):
    svc = SuggestionService(session)
    sent = svc.send_suggestion(subject="More papers", message="Please add Grade 10 physics.", sender=student).unwrap()
    assert (sent.name, sent.email, sent.user_id, sent.is_read) == (student.name, student.email, student.id, False)

    anonymous = svc.send_suggestion(subject="Broken link", message="The download button fails.",
                                    name="Visitor").unwrap()
    assert anonymous.user_id is None

    assert isinstance(svc.list_suggestions(student).error, PermissionDenied)
    assert len(svc.list_suggestions(admin).unwrap()) == 2
    assert svc.mark_read(admin, sent.id).unwrap().is_read is True
    assert isinstance(svc.mark_read(admin, "missing").error, NotFound)
