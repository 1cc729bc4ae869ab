#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 Eric Löffler <eric.loeffler@opalia.systems>
# SPDX-License-Identifier: GPL-3.0-or-later

import sys
from pathlib import Path
from typing import Sequence

from lib_helpers import schedule_common
from lib_helpers.update_schedule import Schedule, advance, parse_step


def main(argv: Sequence[str]) -> int:
    if len(argv) != 5:
        print(f"Usage: {Path(argv[0]).name} <STEP> <UNIT> <BASE_DATETIME> <TIMEZONE|null>", file=sys.stderr)
        return 1

    step_str = argv[1]
    unit = argv[2]
    base_str = argv[3]
    tz_name = argv[4]

    try:
        base_dt = schedule_common.parse_dt_with_tz(base_str, tz_name)
        schedule = Schedule(anchor=base_dt, unit=unit, step=parse_step(step_str))
        next_dt = advance(base_dt, schedule.step, schedule.unit)

        print(schedule_common.finalize_result(base_dt, next_dt))
        return 0

    except Exception as e:
        print(f"Error: Failed to compute next wakeup every \"{step_str} {unit}\": {e}", file=sys.stderr)
        return 3


if __name__ == "__main__":
    sys.exit(main(sys.argv))
