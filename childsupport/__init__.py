"""Child Support Calc - Georgia child support guideline estimates."""

__version__ = "0.3.0"
