"""
Repository layer for database operations.

Async functions taking the request's session first. Each function is one or
a few statements; cross-table work (counters, cascades) lives here too so
that services never build queries themselves.
"""
from eventdekho.db.repositories.users import (
    STATUS_PENDING,
    STATUS_VERIFIED,
    count_users,
    count_verified_organizers,
    create_user,
    delete_user_cascade,
    get_user,
    get_user_by_email,
    list_users,
    update_user,
)
from eventdekho.db.repositories.events import (
    count_events,
    create_event,
    delete_event,
    get_event,
    increment_counter,
    list_events,
    list_events_liked_by,
    update_event,
)
from eventdekho.db.repositories.comments import (
    create_comment,
    delete_comment,
    get_comment,
    list_comments_by_user,
    list_comments_for_event,
    update_comment_text,
)
from eventdekho.db.repositories.likes import create_like, delete_like, get_like
from eventdekho.db.repositories.participations import (
    count_participations,
    create_participation,
    list_participations_for_event,
)
from eventdekho.db.repositories.sponsor_ads import (
    create_ad,
    delete_ad,
    get_ad,
    list_ads,
    list_running_and_upcoming_ads,
)
from eventdekho.db.repositories.announcements import (
    create_announcement,
    delete_announcement,
    get_announcement,
    increment_announcement_counter,
    list_all_announcements,
    list_live_announcements,
    update_announcement,
)
from eventdekho.db.repositories.password_reset_tokens import (
    create_reset_token,
    delete_reset_token,
    get_reset_token,
    purge_expired_reset_tokens,
)
