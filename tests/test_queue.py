"""Tests for the serialized spin queue."""
from unittest.mock import MagicMock

from clubreel.feed.win_feed import WinFeed
from clubreel.reel.catalog import Prize
from clubreel.reel.queue import RecentWinsUpdate, SingleWin, SpinJob, SpinQueue


class FakeReel:
    """Runner that records started spins and lets the test land them."""

    def __init__(self, ready=True):
        self.ready = ready
        self.started = []
        self._landing = None

    def __call__(self, prize, on_complete):
        if not self.ready or self._landing is not None:
            return False
        self.started.append(prize.name)
        self._landing = on_complete
        return True

    def land(self):
        on_complete, self._landing = self._landing, None
        on_complete()


def job(name, spinner=None):
    prize = Prize(id=f"p-{name}", name=name)
    return SpinJob(prize=prize, pending_win=SingleWin(spinner or "Guest", name), spinner_name=spinner)


def test_jobs_play_strictly_in_arrival_order():
    reel = FakeReel()
    feed = WinFeed()
    queue = SpinQueue(reel, feed)
    for name in ("X", "Y", "Z"):
        queue.enqueue(job(name))

    assert reel.started == ["X"]
    assert len(queue) == 2
    reel.land()
    reel.land()
    reel.land()
    assert reel.started == ["X", "Y", "Z"]
    assert [e.text for e in feed.entries] == ["Guest won Z", "Guest won Y", "Guest won X"]
    assert not queue.active


def test_feed_is_updated_before_next_spin_starts():
    reel = FakeReel()
    feed = WinFeed()
    feed_sizes = []
    queue = SpinQueue(reel, feed, on_job_started=lambda j: feed_sizes.append(len(feed)))
    queue.enqueue(job("X"))
    queue.enqueue(job("Y"))
    reel.land()
    assert feed_sizes == [0, 1]


def test_not_ready_runner_keeps_job_at_head():
    reel = FakeReel(ready=False)
    spinner = MagicMock()
    queue = SpinQueue(reel, WinFeed(), on_spinner_changed=spinner)
    queue.enqueue(job("X", spinner="Ann"))
    queue.enqueue(job("Y"))

    assert [j.prize.name for j in queue.pending] == ["X", "Y"]
    assert spinner.call_args.args == (None,)

    reel.ready = True
    assert queue.run_next() is True
    assert reel.started == ["X"]
    assert spinner.call_args.args == ("Ann",)


def test_spinner_name_cleared_when_spin_lands():
    reel = FakeReel()
    names = []
    queue = SpinQueue(reel, WinFeed(), on_spinner_changed=names.append)
    queue.enqueue(job("X", spinner="Ann"))
    reel.land()
    assert names == ["Ann", None]


def test_max_pending_drops_oldest_waiting_job():
    reel = FakeReel()
    dropped = MagicMock()
    queue = SpinQueue(reel, WinFeed(), max_pending=1, on_job_dropped=dropped)
    queue.enqueue(job("X"))
    queue.enqueue(job("Y"))
    queue.enqueue(job("Z"))

    dropped.assert_called_once()
    assert dropped.call_args.args[0].prize.name == "Y"
    assert [j.prize.name for j in queue.pending] == ["Z"]


def test_recent_wins_update_replaces_feed():
    reel = FakeReel()
    feed = WinFeed()
    feed.add("Old", "Mug")
    queue = SpinQueue(reel, feed)
    recent = ({"text": "Ann won Cap"}, {"name": "Bob", "prizeName": "Mug"})
    queue.enqueue(SpinJob(prize=Prize(id="p", name="Cap"), pending_win=RecentWinsUpdate(recent)))
    assert [e.text for e in feed.entries] == ["Old won Mug"]
    reel.land()
    assert [e.text for e in feed.entries] == ["Ann won Cap", "Bob won Mug"]
