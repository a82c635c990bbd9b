def pytest_addoption(parser):
    parser.addoption(
        "--run-all",
        action="store_true",
        default=False,
        help="Also run the slow convergence order evaluations in 'tests/evals'.",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: convergence order evaluations")
    if config.getoption("--run-all"):
        #drop the 'not slow' filter of the default options
        config.option.markexpr = ""
