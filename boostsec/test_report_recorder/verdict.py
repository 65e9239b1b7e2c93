"""Derive the verdict of a recording step from aggregated test results."""

from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import BuildResult, Verdict

EMPTY_RESULT_WARNING = "None of the test reports contained any result"


def is_empty_result(aggregate: AggregateResult) -> bool:
    """Return True when the results hold neither passing nor failing tests."""
    return aggregate.pass_count == 0 and aggregate.fail_count == 0


def derive_verdict(aggregate: AggregateResult, prior_result: BuildResult) -> Verdict:
    """Decide how the build is affected by the aggregated results.

    An empty result on a build that has already failed is not reported again:
    the missing tests are attributed to the earlier failure. Only the build's
    result at the time of the call is considered, so a failure set by a step
    running concurrently is treated the same as one set before this step.

    Args:
        aggregate: Test results after parsing or merging
        prior_result: Build result before this step changed anything

    Returns:
        The verdict for this step

    """
    if is_empty_result(aggregate):
        if prior_result == BuildResult.FAILURE:
            return Verdict.SUCCESS
        return Verdict.FAILURE
    if aggregate.fail_count > 0:
        return Verdict.UNSTABLE
    return Verdict.SUCCESS
