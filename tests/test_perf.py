import time

from mediaindex.perf import PerfChecker, PerfTimeWatch


def test_watch_measures_sleep():
    watch = PerfTimeWatch()
    watch.start()
    time.sleep(0.02)
    watch.end()
    assert watch.elapsed() >= 19


def test_fresh_watch_is_zero():
    assert PerfTimeWatch().elapsed() == 0


def test_start_unknown_name_fails():
    checker = PerfChecker()
    assert checker.start("scan") is False


def test_end_unknown_name_is_zero():
    checker = PerfChecker()
    assert checker.end("scan") == 0


def test_add_start_end():
    checker = PerfChecker()
    assert checker.add("scan") is True
    assert checker.start("scan") is True
    time.sleep(0.02)
    assert checker.end("scan") >= 19


def test_add_again_keeps_running_watch():
    checker = PerfChecker()
    checker.add("scan")
    checker.start("scan")
    time.sleep(0.02)
    checker.add("scan")
    assert checker.end("scan") >= 19