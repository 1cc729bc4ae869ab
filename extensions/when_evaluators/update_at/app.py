#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2025 Eric Löffler <eric.loeffler@opalia.systems>
# SPDX-License-Identifier: GPL-3.0-or-later

import sys
from pathlib import Path
from typing import Sequence

from lib_helpers import schedule_common
from lib_helpers.update_schedule import Schedule, next_occurrence, parse_step


def main(argv: Sequence[str]) -> int:
    if len(argv) != 7:
        print(f"Usage: {Path(argv[0]).name} <FIRST_UPDATE> <DATE_ORDER> <TIMEZONE|null> <UNIT> <STEP> "
              f"<BASE_DATETIME>", file=sys.stderr)
        return 1

    first_str = argv[1]
    date_order = argv[2]
    tz_name = argv[3]
    unit = argv[4]
    step_str = argv[5]
    base_str = argv[6]

    try:
        dayfirst = schedule_common.parse_date_order(date_order)
        first_dt = schedule_common.parse_dt_with_tz(first_str, tz_name, dayfirst=dayfirst)
        base_dt = schedule_common.parse_dt_with_tz(base_str, tz_name)

        schedule = Schedule(anchor=first_dt, unit=unit, step=parse_step(step_str))
        next_dt = next_occurrence(schedule, base_dt)

        print(schedule_common.finalize_result(base_dt, next_dt))
        return 0

    except Exception as e:
        print(f"Error: Failed to compute next wakeup from \"{first_str}\" every \"{step_str} {unit}\": {e}",
              file=sys.stderr)
        return 3


if __name__ == "__main__":
    sys.exit(main(sys.argv))
