#!/usr/bin/env python3
# Copyright (C) 2019 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from setuptools import find_packages, setup

setup(
    name="check-tempager-3e-temperature",
    version="1.0.0",
    description="Active check for the temperature sensors of an AVTECH TemPageR 3E",
    packages=find_packages(include=["tempager", "tempager.*"]),
    python_requires=">=3.11",
    install_requires=["pydantic>=2", "pyasn1>=0.6.4", "pysnmp>=7.1"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "check_tempager_3e_temperature=tempager.active_checks.check_tempager_3e_temperature:main",
        ],
    },
)
