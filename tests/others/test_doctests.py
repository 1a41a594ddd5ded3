import doctest

import pytest

from wirebind import runtime, type_info
from wirebind.code_gen import utils as code_gen_utils
from wirebind.schema import models as schema_models


@pytest.mark.parametrize('module', [runtime, type_info, code_gen_utils, schema_models])
def test_doctests(module) -> None:
    result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
