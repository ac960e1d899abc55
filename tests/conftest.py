import matplotlib

matplotlib.use("Agg")

import pytest

from combination_search import gen_valid_combs


@pytest.fixture(scope="session")
def black_combinations():
    return gen_valid_combs("000000", verbose=False)


@pytest.fixture(scope="session")
def white_combinations():
    return gen_valid_combs("FFFFFF", verbose=False)
