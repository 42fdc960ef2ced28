"""Tests for fleet commit and reveal."""

import pytest

from conquest_agent.errors import (
    ConfigurationError,
    FleetNotFoundError,
    LedgerError,
    PlanetNotFoundError,
)
from conquest_agent.models.fleet import ResolveStatus, SendOptions
from conquest_agent.utils.hashing import (
    bytes32_from_hex,
    compute_fleet_id,
    compute_to_hash,
    fleet_id_to_int,
)

from .conftest import ALICE, BOB, CAROL, GENESIS, RESOLVE_WINDOW, TIME_PER_DISTANCE

SECRET = "0x" + "5e" * 32

# Planet 100 -> 200 is distance 10 in the fixture catalog.
ETA = GENESIS + 10 * TIME_PER_DISTANCE
RESOLVABLE_AT = ETA + RESOLVE_WINDOW


class TestSend:
    """Test committing fleets."""

    @pytest.mark.asyncio
    async def test_send_stores_record(self, fleet_manager, storage, clock):
        fleet = await fleet_manager.send(100, 200, 50)

        assert fleet.estimated_arrival_time == 1600
        assert fleet.arrival_time_wanted == 1600
        assert fleet.fleet_sender == ALICE
        assert fleet.operator == ALICE
        assert fleet.committed_at == clock.now
        assert not fleet.resolved
        assert fleet.commit_tx_hash is not None
        assert await storage.get_fleet(fleet.fleet_id) == fleet

    @pytest.mark.asyncio
    async def test_fleet_id_matches_commitment(self, fleet_manager):
        fleet = await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))

        to_hash = compute_to_hash(200, SECRET)
        assert fleet.secret == SECRET
        assert fleet.fleet_id == compute_fleet_id(to_hash, 100, ALICE, ALICE)

    @pytest.mark.asyncio
    async def test_send_submits_to_hash_only(self, fleet_manager, ledger):
        await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))

        (call,) = ledger.written_calls("send")
        assert call.args == (100, 50, bytes32_from_hex(compute_to_hash(200, SECRET)))
        assert ledger.simulated == ledger.written

    @pytest.mark.asyncio
    async def test_options_are_recorded(self, fleet_manager):
        fleet = await fleet_manager.send(
            100,
            200,
            50,
            SendOptions(gift=True, specific=BOB.lower(), arrival_time_wanted=5000),
        )
        assert fleet.gift
        assert fleet.specific == BOB
        assert fleet.arrival_time_wanted == 5000
        assert fleet.estimated_arrival_time == 1600

    @pytest.mark.asyncio
    async def test_each_send_gets_fresh_secret(self, fleet_manager):
        a = await fleet_manager.send(100, 200, 50)
        b = await fleet_manager.send(100, 200, 50)
        assert a.secret != b.secret
        assert a.fleet_id != b.fleet_id

    @pytest.mark.asyncio
    async def test_send_for_uses_signer_as_operator(self, fleet_manager, ledger):
        fleet = await fleet_manager.send_for(BOB, CAROL, 100, 200, 50, SendOptions(secret=SECRET))

        assert fleet.fleet_sender == BOB
        assert fleet.operator == ALICE
        assert fleet.fleet_id == compute_fleet_id(compute_to_hash(200, SECRET), 100, BOB, ALICE)

        (call,) = ledger.written_calls("sendFor")
        (params,) = call.args
        assert params["fleetSender"] == BOB
        assert params["fleetOwner"] == CAROL
        assert params["from"] == 100
        assert params["quantity"] == 50

    @pytest.mark.asyncio
    async def test_send_for_self_matches_self_send(self, fleet_manager, storage):
        own = await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))
        delegated = await fleet_manager.send_for(ALICE, ALICE, 100, 200, 50, SendOptions(secret=SECRET))
        assert own.fleet_id == delegated.fleet_id
        assert len(await storage.get_all_fleets()) == 1

    @pytest.mark.asyncio
    async def test_requires_signing_key(self, fleet_manager, ledger, storage):
        ledger.account = None
        with pytest.raises(ConfigurationError, match="CONQUEST_PRIVATE_KEY"):
            await fleet_manager.send(100, 200, 50)
        assert ledger.simulated == []
        assert await storage.get_all_fleets() == []

    @pytest.mark.asyncio
    async def test_unknown_planet(self, fleet_manager, ledger):
        with pytest.raises(PlanetNotFoundError) as exc_info:
            await fleet_manager.send(100, 999, 50)
        assert exc_info.value.planet_id == 999
        assert ledger.simulated == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 2**32])
    async def test_invalid_quantity(self, fleet_manager, quantity):
        with pytest.raises(ValueError, match="quantity"):
            await fleet_manager.send(100, 200, quantity)

    @pytest.mark.asyncio
    async def test_simulate_failure_leaves_no_record(self, fleet_manager, ledger, storage):
        ledger.fail_simulate.add("send")
        with pytest.raises(LedgerError) as exc_info:
            await fleet_manager.send(100, 200, 50)
        assert exc_info.value.stage == "simulate"
        assert ledger.written == []
        assert await storage.get_all_fleets() == []

    @pytest.mark.asyncio
    async def test_write_failure_rolls_back_record(self, fleet_manager, ledger, storage):
        ledger.fail_write.add("send")
        with pytest.raises(LedgerError, match="insufficient funds"):
            await fleet_manager.send(100, 200, 50)
        assert await storage.get_all_fleets() == []

    @pytest.mark.asyncio
    async def test_write_failure_restores_existing_record(self, fleet_manager, ledger, storage):
        original = await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))

        ledger.fail_write.add("send")
        with pytest.raises(LedgerError):
            await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))

        assert await storage.get_fleet(original.fleet_id) == original

    @pytest.mark.asyncio
    async def test_record_saved_before_broadcast(self, fleet_manager, ledger, storage):
        """The secret must be on disk by the time the commit is broadcast."""
        seen = []
        write = ledger.write

        async def checking_write(request):
            seen.extend(await storage.get_all_fleets())
            return await write(request)

        ledger.write = checking_write
        fleet = await fleet_manager.send(100, 200, 50)

        assert [f.fleet_id for f in seen] == [fleet.fleet_id]
        assert seen[0].commit_tx_hash is None
        assert seen[0].secret == fleet.secret


class TestResolve:
    """Test revealing fleets."""

    @pytest.mark.asyncio
    async def test_too_early(self, fleet_manager, ledger, clock):
        fleet = await fleet_manager.send(100, 200, 50)
        clock.now = RESOLVABLE_AT - 1

        result = await fleet_manager.resolve(fleet.fleet_id)

        assert result.status == ResolveStatus.TOO_EARLY
        assert not result.resolved
        assert str(RESOLVABLE_AT) in result.reason
        assert "1s remaining" in result.reason
        assert ledger.written_calls("resolveFleet") == []

    @pytest.mark.asyncio
    async def test_resolves_at_window_boundary(self, fleet_manager, ledger, storage, clock):
        fleet = await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET))
        clock.now = RESOLVABLE_AT

        result = await fleet_manager.resolve(fleet.fleet_id)

        assert result.status == ResolveStatus.RESOLVED
        assert result.fleet.resolved
        assert result.fleet.resolved_at == RESOLVABLE_AT
        assert result.fleet.resolve_tx_hash in ledger.receipts
        assert (await storage.get_fleet(fleet.fleet_id)).resolved

    @pytest.mark.asyncio
    async def test_reveal_arguments(self, fleet_manager, ledger, clock):
        fleet = await fleet_manager.send(100, 200, 50, SendOptions(secret=SECRET, gift=True))
        clock.now = RESOLVABLE_AT

        await fleet_manager.resolve(fleet.fleet_id)

        (call,) = ledger.written_calls("resolveFleet")
        fleet_id, params = call.args
        assert fleet_id == fleet_id_to_int(fleet.fleet_id)
        assert params["from"] == 100
        assert params["to"] == 200
        assert params["distance"] == 10
        assert params["arrivalTimeWanted"] == ETA
        assert params["gift"] is True
        assert params["secret"] == bytes32_from_hex(SECRET)
        assert params["fleetSender"] == ALICE
        assert params["operator"] == ALICE

    @pytest.mark.asyncio
    async def test_already_resolved_is_idempotent(self, fleet_manager, ledger, clock):
        fleet = await fleet_manager.send(100, 200, 50)
        clock.now = RESOLVABLE_AT
        await fleet_manager.resolve(fleet.fleet_id)

        clock.advance(100)
        result = await fleet_manager.resolve(fleet.fleet_id)

        assert result.status == ResolveStatus.ALREADY_RESOLVED
        assert result.resolved
        assert result.fleet.resolved_at == RESOLVABLE_AT
        assert len(ledger.written_calls("resolveFleet")) == 1

    @pytest.mark.asyncio
    async def test_unknown_fleet(self, fleet_manager):
        with pytest.raises(FleetNotFoundError):
            await fleet_manager.resolve("0x" + "00" * 32)

    @pytest.mark.asyncio
    async def test_ledger_rejection_keeps_record_unresolved(self, fleet_manager, ledger, storage, clock):
        fleet = await fleet_manager.send(100, 200, 50)
        clock.now = RESOLVABLE_AT
        ledger.fail_simulate.add("resolveFleet")

        with pytest.raises(LedgerError):
            await fleet_manager.resolve(fleet.fleet_id)
        assert not (await storage.get_fleet(fleet.fleet_id)).resolved

    @pytest.mark.asyncio
    async def test_receipt_timeout_does_not_rebroadcast(self, fleet_manager, ledger, storage, clock):
        """A reveal whose receipt timed out is confirmed later, never sent twice."""
        fleet = await fleet_manager.send(100, 200, 50)
        clock.now = RESOLVABLE_AT
        ledger.receipt_errors.append(LedgerError("receipt", "timed out"))

        first = await fleet_manager.resolve_all_ready()

        assert [f.fleet_id for f in first.failed] == [fleet.fleet_id]
        assert "timed out" in first.failed[0].reason
        in_flight = await storage.get_fleet(fleet.fleet_id)
        assert not in_flight.resolved
        assert in_flight.resolve_tx_hash is not None

        second = await fleet_manager.resolve_all_ready()

        assert [f.fleet_id for f in second.successful] == [fleet.fleet_id]
        assert len(ledger.written_calls("resolveFleet")) == 1
        assert ledger.receipts == [in_flight.resolve_tx_hash, in_flight.resolve_tx_hash]
        assert second.successful[0].resolve_tx_hash == in_flight.resolve_tx_hash

    @pytest.mark.asyncio
    async def test_reverted_reveal_can_be_resubmitted(self, fleet_manager, ledger, storage, clock):
        fleet = await fleet_manager.send(100, 200, 50)
        clock.now = RESOLVABLE_AT
        ledger.receipt_errors.append(LedgerError("reverted", "transaction reverted"))

        with pytest.raises(LedgerError):
            await fleet_manager.resolve(fleet.fleet_id)
        assert (await storage.get_fleet(fleet.fleet_id)).resolve_tx_hash is None

        result = await fleet_manager.resolve(fleet.fleet_id)

        assert result.status == ResolveStatus.RESOLVED
        assert len(ledger.written_calls("resolveFleet")) == 2

    @pytest.mark.asyncio
    async def test_end_to_end(self, fleet_manager, storage, clock):
        """Commit 50 ships from 100 to 200, then reveal once the window passes."""
        fleet = await fleet_manager.send(100, 200, 50)
        assert fleet.estimated_arrival_time == 1600
        assert not (await storage.get_fleet(fleet.fleet_id)).resolved

        clock.now = 1600
        early = await fleet_manager.resolve(fleet.fleet_id)
        assert early.status == ResolveStatus.TOO_EARLY

        clock.now = 1600 + RESOLVE_WINDOW + 1
        late = await fleet_manager.resolve(fleet.fleet_id)
        assert late.status == ResolveStatus.RESOLVED
        assert (await storage.get_fleet(fleet.fleet_id)).resolved


class TestResolveAllReady:
    """Test batch resolution."""

    @pytest.mark.asyncio
    async def test_resolvable_fleets(self, fleet_manager, clock):
        near = await fleet_manager.send(100, 300, 5)  # distance 5, ETA 1300
        far = await fleet_manager.send(100, 200, 5)  # distance 10, ETA 1600

        clock.now = 1300 + RESOLVE_WINDOW
        ready = await fleet_manager.get_resolvable_fleets()
        assert [f.fleet_id for f in ready] == [near.fleet_id]

        clock.now = RESOLVABLE_AT
        ready = {f.fleet_id for f in await fleet_manager.get_resolvable_fleets()}
        assert ready == {near.fleet_id, far.fleet_id}

    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_batch(self, fleet_manager, ledger, storage, clock):
        fleets = [await fleet_manager.send(100, 200, n) for n in (1, 2, 3)]
        ledger.fail_resolve_ids.add(fleet_id_to_int(fleets[1].fleet_id))
        clock.now = RESOLVABLE_AT

        result = await fleet_manager.resolve_all_ready()

        assert {f.fleet_id for f in result.successful} == {fleets[0].fleet_id, fleets[2].fleet_id}
        assert [f.fleet_id for f in result.failed] == [fleets[1].fleet_id]
        assert "execution reverted" in result.failed[0].reason
        assert not (await storage.get_fleet(fleets[1].fleet_id)).resolved

    @pytest.mark.asyncio
    async def test_nothing_ready(self, fleet_manager, ledger):
        await fleet_manager.send(100, 200, 5)
        result = await fleet_manager.resolve_all_ready()
        assert result.successful == []
        assert result.failed == []
        assert ledger.written_calls("resolveFleet") == []

    @pytest.mark.asyncio
    async def test_requires_signing_key(self, fleet_manager, ledger):
        ledger.account = None
        with pytest.raises(ConfigurationError):
            await fleet_manager.resolve_all_ready()


class TestFleetQueries:
    @pytest.mark.asyncio
    async def test_my_pending_fleets(self, fleet_manager, clock):
        mine = await fleet_manager.send(100, 200, 5)
        await fleet_manager.send_for(BOB, BOB, 100, 200, 5)
        resolved = await fleet_manager.send(100, 300, 5)
        clock.now = 1300 + RESOLVE_WINDOW
        await fleet_manager.resolve(resolved.fleet_id)

        pending = await fleet_manager.get_my_pending_fleets()
        assert [f.fleet_id for f in pending] == [mine.fleet_id]
        assert len(await fleet_manager.get_all_fleets()) == 3

    @pytest.mark.asyncio
    async def test_cleanup_old_resolved(self, fleet_manager, clock):
        fleet = await fleet_manager.send(100, 200, 5)
        pending = await fleet_manager.send(100, 300, 5)
        clock.now = RESOLVABLE_AT
        await fleet_manager.resolve(fleet.fleet_id)

        assert await fleet_manager.cleanup_old_resolved_fleets(7) == 0
        clock.advance(8 * 86400)
        assert await fleet_manager.cleanup_old_resolved_fleets(7) == 1
        assert await fleet_manager.get_fleet(fleet.fleet_id) is None
        assert await fleet_manager.get_fleet(pending.fleet_id) is not None
