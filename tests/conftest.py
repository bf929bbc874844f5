import os

from hypothesis import HealthCheck, settings

# Subprocess-based CLI tests report coverage only when the child process opts in
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

settings.register_profile(
    "ci",
    max_examples=300,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile("dev", max_examples=50)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
