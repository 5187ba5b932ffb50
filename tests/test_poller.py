import asyncio

import httpx
import pytest

from draftboard.errors import DraftFetchError
from draftboard.ingest import RosterIndex
from draftboard.models import Pick, Player, RankedPlayer
from draftboard.poller import (
    DraftSession,
    RefreshCycle,
    RefreshOutcome,
    RefreshStatus,
    SleeperDraftClient,
)


class FakeSource:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[str] = []

    async def fetch_picks(self, draft_id: str) -> list[Pick]:
        self.calls.append(draft_id)
        result = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(result, Exception):
            raise result
        return list(result)


class GatedSource:
    """First call blocks until released; later calls return immediately."""

    def __init__(self, slow: list[Pick], fast: list[Pick]):
        self.release = asyncio.Event()
        self.slow = slow
        self.fast = fast
        self.calls = 0

    async def fetch_picks(self, draft_id: str) -> list[Pick]:
        self.calls += 1
        if self.calls == 1:
            await self.release.wait()
            return self.slow
        return self.fast


def _session(draft_id: str = "d1", **kwargs) -> DraftSession:
    roster = RosterIndex(
        [
            Player(player_id="100", first_name="Ja'Marr", last_name="Chase", team="CIN", position="WR"),
            Player(player_id="7", first_name="Bijan", last_name="Robinson", team="ATL", position="RB"),
        ]
    )
    rankings = [
        RankedPlayer(rank=1, tier=1, name="Ja'Marr Chase", position="WR"),
        RankedPlayer(rank=2, tier=1, name="Bijan Robinson", position="RB"),
    ]
    return DraftSession(draft_id=draft_id, roster=roster, rankings=rankings, **kwargs)


def _mock_client(handler) -> SleeperDraftClient:
    return SleeperDraftClient(base_url="https://sleeper.test/v1", transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_client_parses_picks():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json=[
                {"pick_no": 1, "player_id": "100", "round": 1, "draft_slot": 1, "metadata": {}},
                {"pick_no": 2, "player_id": None, "round": 1, "draft_slot": 2},
            ],
        )

    picks = await _mock_client(handler).fetch_picks("123")

    assert seen == ["https://sleeper.test/v1/draft/123/picks"]
    assert [pick.player_id for pick in picks] == ["100", None]


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("response", "message"),
    [
        (httpx.Response(503, text="down"), "HTTP error! status: 503"),
        (httpx.Response(200, json={"error": "nope"}), "Invalid response format"),
        (httpx.Response(200, text="<html>"), "Invalid response format"),
    ],
)
async def test_client_failures_raise_fetch_error(response, message):
    client = _mock_client(lambda request: response)

    with pytest.raises(DraftFetchError, match=message):
        await client.fetch_picks("123")


@pytest.mark.anyio
async def test_client_transport_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DraftFetchError, match="Request failed"):
        await _mock_client(handler).fetch_picks("123")


@pytest.mark.anyio
async def test_client_skips_malformed_picks():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"pick_no": 2, "player_id": "7"},
                {"player_id": "1"},
                {"pick_no": 0, "player_id": "9"},
                "not-a-pick",
                {"pick_no": 1, "player_id": "100"},
            ],
        )

    picks = await _mock_client(handler).fetch_picks("123")

    assert [pick.pick_no for pick in picks] == [2, 1]


@pytest.mark.anyio
async def test_client_escapes_draft_id_in_path():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode("ascii"))
        return httpx.Response(200, json=[])

    await _mock_client(handler).fetch_picks("../../user/abc?x=")

    assert seen == ["/v1/draft/..%2F..%2Fuser%2Fabc%3Fx%3D/picks"]


@pytest.mark.anyio
async def test_control_character_in_draft_id_does_not_escape_refresh():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode("ascii"))
        return httpx.Response(200, json=[{"pick_no": 1, "player_id": "100"}])

    session = _session(draft_id="12\x0134")

    outcome = await RefreshCycle(session, _mock_client(handler)).refresh()

    assert outcome is RefreshOutcome.SUCCESS
    assert seen == ["/v1/draft/12%0134/picks"]


@pytest.mark.anyio
async def test_invalid_url_becomes_failure():
    client = SleeperDraftClient(
        base_url="https://sleeper.test/v\x01",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])),
    )
    session = _session()

    outcome = await RefreshCycle(session, client).refresh()

    assert outcome is RefreshOutcome.FAILURE
    assert session.error is not None
    assert session.error.startswith("Request failed")


@pytest.mark.anyio
async def test_refresh_success_updates_session():
    session = _session()
    updates: list[int] = []
    session.add_listener(lambda s: updates.append(len(s.view.picks)))
    source = FakeSource([Pick(pick_no=1, player_id="100")])

    outcome = await RefreshCycle(session, source).refresh()

    assert outcome is RefreshOutcome.SUCCESS
    assert source.calls == ["d1"]
    assert session.status is RefreshStatus.IDLE
    assert session.last_refreshed_at is not None
    assert session.error is None
    assert [pick.name for pick in session.view.picks] == ["Ja'Marr Chase"]
    assert [player.ranked.name for player in session.view.available] == ["Bijan Robinson"]
    assert updates == [1]


@pytest.mark.anyio
async def test_refresh_failure_keeps_previous_snapshot():
    session = _session()
    source = FakeSource([Pick(pick_no=1, player_id="100")], DraftFetchError("HTTP error! status: 500"))
    cycle = RefreshCycle(session, source)

    assert await cycle.refresh() is RefreshOutcome.SUCCESS
    state = session.state
    refreshed_at = session.last_refreshed_at

    assert await cycle.refresh() is RefreshOutcome.FAILURE
    assert session.state is state
    assert session.last_refreshed_at == refreshed_at
    assert session.error == "HTTP error! status: 500"
    assert len(session.view.picks) == 1

    source.responses = [[Pick(pick_no=1, player_id="100")]]
    assert await cycle.refresh() is RefreshOutcome.SUCCESS
    assert session.error is None


@pytest.mark.anyio
async def test_refresh_without_draft_id_is_a_failure():
    session = _session(draft_id="")
    source = FakeSource([])

    assert await RefreshCycle(session, source).refresh() is RefreshOutcome.FAILURE
    assert source.calls == []
    assert session.error == "No draft id configured"


@pytest.mark.anyio
async def test_same_snapshot_twice_gives_identical_views():
    picks = [Pick(pick_no=2, player_id="7"), Pick(pick_no=1, player_id="100")]
    session = _session()
    cycle = RefreshCycle(session, FakeSource(picks))

    await cycle.refresh()
    first = session.view
    await cycle.refresh()

    assert session.view == first
    assert [pick.pick_no for pick in session.state.picks] == [2, 1]


class QueuedSource:
    """Each call waits on its own gate, so responses can be released in any order."""

    def __init__(self, *snapshots: list[Pick]):
        self.snapshots = list(snapshots)
        self.gates = [asyncio.Event() for _ in snapshots]
        self.calls = 0

    async def fetch_picks(self, draft_id: str) -> list[Pick]:
        index = self.calls
        self.calls += 1
        await self.gates[index].wait()
        return self.snapshots[index]


@pytest.mark.anyio
async def test_overlapping_fetches_applied_in_order_both_land():
    session = _session()
    first = [Pick(pick_no=1, player_id="100")]
    second = [Pick(pick_no=1, player_id="100"), Pick(pick_no=2, player_id="7")]
    source = QueuedSource(first, second)
    cycle = RefreshCycle(session, source)

    older = cycle.request_refresh()
    newer = cycle.request_refresh()
    await asyncio.sleep(0)

    source.gates[0].set()
    assert await older is RefreshOutcome.SUCCESS
    assert [pick.player_id for pick in session.state.picks] == ["100"]

    source.gates[1].set()
    assert await newer is RefreshOutcome.SUCCESS
    assert [pick.player_id for pick in session.state.picks] == ["100", "7"]


@pytest.mark.anyio
async def test_older_failure_after_newer_success_is_discarded():
    session = _session()

    class Source:
        def __init__(self):
            self.release = asyncio.Event()
            self.calls = 0

        async def fetch_picks(self, draft_id: str) -> list[Pick]:
            self.calls += 1
            if self.calls == 1:
                await self.release.wait()
                raise DraftFetchError("HTTP error! status: 504")
            return [Pick(pick_no=1, player_id="7")]

    source = Source()
    cycle = RefreshCycle(session, source)
    older = cycle.request_refresh()
    await asyncio.sleep(0)

    assert await cycle.refresh() is RefreshOutcome.SUCCESS
    source.release.set()

    assert await older is RefreshOutcome.STALE
    assert session.error is None
@pytest.mark.anyio
async def test_slow_stale_response_is_discarded():
    session = _session()
    source = GatedSource(slow=[], fast=[Pick(pick_no=1, player_id="100")])
    cycle = RefreshCycle(session, source)

    slow_task = cycle.request_refresh()
    await asyncio.sleep(0)
    assert session.status is RefreshStatus.FETCHING

    assert await cycle.refresh() is RefreshOutcome.SUCCESS
    source.release.set()
    assert await slow_task is RefreshOutcome.STALE

    assert [pick.player_id for pick in session.state.picks] == ["100"]
    assert session.status is RefreshStatus.IDLE


@pytest.mark.anyio
async def test_change_draft_drops_in_flight_response():
    session = _session()
    source = GatedSource(slow=[Pick(pick_no=1, player_id="100")], fast=[])
    cycle = RefreshCycle(session, source)

    slow_task = cycle.request_refresh()
    await asyncio.sleep(0)
    session.change_draft("d2")
    source.release.set()

    assert await slow_task is RefreshOutcome.STALE
    assert session.draft_id == "d2"
    assert session.state.picks == ()
    assert len(session.view.available) == 2


def test_change_draft_rejects_blank_id():
    session = _session()
    with pytest.raises(ValueError):
        session.change_draft("   ")
    assert session.draft_id == "d1"


@pytest.mark.anyio
async def test_set_position_does_not_fetch():
    session = _session()
    source = FakeSource([Pick(pick_no=1, player_id="100")])
    cycle = RefreshCycle(session, source)
    await cycle.refresh()

    view = session.set_position("RB")

    assert source.calls == ["d1"]
    assert view.position == "RB"
    assert [player.ranked.name for player in view.available] == ["Bijan Robinson"]
    assert view.picks == session.view.picks
    assert session.set_position("").position is None


@pytest.mark.anyio
async def test_run_polls_until_stopped():
    session = _session()
    source = FakeSource(DraftFetchError("boom"), [Pick(pick_no=1, player_id="7")])
    cycle = RefreshCycle(session, source, interval=0.01)
    stop = asyncio.Event()

    runner = asyncio.create_task(cycle.run(stop))
    for _ in range(200):
        if session.last_refreshed_at is not None:
            break
        await asyncio.sleep(0.01)
    stop.set()
    await runner

    assert len(source.calls) >= 2
    assert session.error is None
    assert [pick.player_id for pick in session.view.picks] == ["7"]
    assert cycle.pending == 0


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        RefreshCycle(_session(), FakeSource([]), interval=0)
