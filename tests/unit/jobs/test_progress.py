from swingsubmit.jobs.progress import PHASE_MESSAGES, ProgressEstimator


def test_progress_starts_at_floor_and_caps_below_100() -> None:
    estimator = ProgressEstimator()

    assert estimator.start().percent == 40
    assert estimator.after_attempt(5).percent == 50
    assert estimator.after_attempt(59).percent == 90


def test_progress_never_decreases() -> None:
    estimator = ProgressEstimator()
    estimator.start()
    estimator.after_attempt(20)

    assert estimator.after_attempt(1).percent == 80


def test_done_jumps_to_100() -> None:
    estimator = ProgressEstimator()
    estimator.after_attempt(3)

    assert estimator.done().percent == 100


def test_messages_rotate_every_ten_attempts() -> None:
    estimator = ProgressEstimator()
    estimator.start()
    first = estimator.after_attempt(9).message
    tenth = estimator.after_attempt(10).message
    eleventh = estimator.after_attempt(11).message

    assert tenth in PHASE_MESSAGES
    assert tenth != first
    assert eleventh == tenth
