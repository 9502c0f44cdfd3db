#!/usr/bin/env python

import re
import sys

__all__ = [
    "rfc5234",
    "rfc7230",
    "rfc7235",
    "rfc7617",
]


def check_regex() -> None:
    """Compile every regex in this package, reporting the ones that fail."""
    for module_name in __all__:
        full_name = f"wwwauth.syntax.{module_name}"
        __import__(full_name)
        module = sys.modules[full_name]
        for attr_name in dir(module):
            if attr_name.startswith("_") or attr_name == "SPEC_URL":
                continue
            attr_value = getattr(module, attr_name, None)
            if isinstance(attr_value, str) or hasattr(attr_value, "element"):
                try:
                    re.compile(str(attr_value), re.VERBOSE)
                except re.error as why:
                    print("*", module_name, attr_name, why)


if __name__ == "__main__":
    check_regex()
