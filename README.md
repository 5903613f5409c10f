# pingmonke

pingmonke opens a TCP connection to one host at a fixed interval. It writes
every result to a CSV log, and each period gets its own log file. When a
period ends, it writes a summary file that lists the network events it found.
`tailmonke` shows a log live in the terminal, with colours, running statistics
and the state of the current or last event.

## Installation

```
pip install .
```

This installs two commands, `pingmonke` and `tailmonke`. To run the tests,
install the `test` extra (`pip install .[test]`) and run `pytest`.

## Configuration

Both commands read a YAML file. The default is `config.yaml` in the current
directory. Every key is optional. These are the defaults:

```yaml
target: google.com      # host to connect to
log_dir: ~/ping-logs    # where logs are written; a leading ~ is expanded
interval: 15s           # time between probes in normal mode
debug_interval: 5s      # time between probes in debug rollover mode
port: 80                # TCP port to connect to
use_icmp: false         # see "What it does not do"
tailmonke:
  lines_to_display: 20  # rows shown by tailmonke --non-interactive
```

Durations take the usual unit suffixes, such as `500ms`, `15s`, `1m30s` or
`2h`.

- If the file is missing, or is not valid YAML, the defaults are used.
- If a key has a value of the wrong type, an error is printed. The other keys
  still take effect.

## Running the probe service

```
pingmonke [-v] [--debug-rollover] [--config PATH]
```

It runs until it is stopped.

- **Normal mode.** A period is one day, starting at midnight UTC. The log is
  named `YYYY-MM-DD-pings.csv`.
- **`--debug-rollover`.** A period is one minute. The log is named
  `HH:MM:SS.mmm-pings.csv` and `debug_interval` is used. This flag also turns
  on verbose output.
- **`-v`.** Prints one line for each probe as it finishes.

Probes are aligned to the interval, counted from the start of the period. Each
probe runs in its own thread.

Each row holds four values: the start time, the end time (as
`YYYY-MM-DD HH:MM:SS.mmm`), the latency in milliseconds, and a status.

| Status    | Meaning                                         |
|-----------|-------------------------------------------------|
| `ok`      | connected in under 100 ms                       |
| `delayed` | connected, but it took 100 ms or more           |
| `timeout` | the connection failed or took longer than 15 s  |

When a period ends, the summary file is written next to the log. It is named
`<name>-pings-summary.csv`. It holds:

- the total count, and the count of each status;
- a section for every event.

A probe counts as bad when it timed out or took 100 ms or more.

- **Start.** An event starts with two bad probes in a row that began within
  the window of each other. The window is 60 s, or 15 s in debug mode.
- **End.** The event ends once the good probes that follow it cover a whole
  window.

Each event section gives the event's start, end and duration. It also lists
the event's probes, with up to three probes of context on either side. Context
rows are marked with `* `.

## Watching the logs

```
tailmonke [--file PATH] [--config PATH] [--non-interactive]
```

Without `--file`, tailmonke opens the most recently modified `*-pings.csv` in
the configured log directory. If there is none, it exits with status 1.

The interactive view fills the terminal with the newest rows. It rereads the
log every second when the file has changed.

- The header is red while an event is active and green otherwise.
- Below the rows there are three lines:
  - a notification line;
  - the totals and the average latency (timeouts are left out of the average);
  - the duration of the current or last event.
- When the log was found automatically, tailmonke checks every five seconds
  for a newer `*-pings.csv` in the same directory. When it finds one, it dims
  the rows and offers to switch.

| Key            | Action                                                |
|----------------|-------------------------------------------------------|
| `q`, `Ctrl+C`  | quit                                                  |
| `F5`, `Ctrl+R` | rewrite the summary file (normal-mode window), reload |
| `n`, `N`       | switch to the newer log file when one is offered      |

The view also reports an event of its own. This uses a simpler rule than the
summary file:

- An event is active while two or more of the last four probes are `delayed`
  or `timeout`.
- An earlier event is over once four `ok` probes in a row follow its last bad
  probe.

`--non-interactive` does not start the interactive view. It prints the header,
the last `lines_to_display` rows and the statistics line, then exits. If the
log cannot be read, it exits with status 1.

## Using it as a library

```python
from pingmonke.pinglog import read_ping_file, get_summary_stats
from pingmonke.event import detect_event
from pingmonke.render import format_summary_line
from pingmonke.summary import generate_summary_with_logging
from pingmonke.config import Config

lines = read_ping_file("2026-01-08-pings.csv")
status = detect_event(lines)
print(status.is_active, status.start_time, status.duration)
print(format_summary_line(*get_summary_stats("2026-01-08-pings.csv")))
print(generate_summary_with_logging("2026-01-08-pings.csv", Config(), True))
```

## What it does not do

- **No ICMP.** There is no ICMP ping. When `use_icmp` is true, no packet is
  sent, and every probe is logged as `ok` with a fixed latency of 42 ms.
  Only the TCP probe measures the network.
- **No service setup.** pingmonke does not install itself as a system service
  and does not daemonise. Run it under a service manager of your choice.