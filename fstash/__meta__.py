# -*- coding: utf-8 -*-
"""Define project metadata
"""

__title__ = "fstash"
__summary__ = "Save named directory snapshots into sharded storage and expand them back."
__url__ = None

__version__ = "0.1.0"

__install_requires__ = ["fs>=2.4.16", "Jinja2>=3.0", "click>=8.0", "setuptools<81"]
__tests_require__ = ["pytest", "tox"]

__author__ = "fstash contributors"
__email__ = None

__license__ = "MIT License"
