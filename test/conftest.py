# pylint: disable=unused-import
from fixtures.general import cache_path, conn, w3_mock
from fixtures.events import events_repo
from fixtures.intervals import intervals_repo
from fixtures.cache import events_cache, event_filter
