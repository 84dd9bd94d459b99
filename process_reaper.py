#!/usr/bin/env python3
"""
Process Reaper - Per-Process Memory Watchdog
Terminates every process with a given name whose resident memory reaches a
configured limit: SIGTERM first, SIGKILL if it is still around after a grace
period. Optionally reports readiness and liveness to the systemd watchdog.
"""

import os
import sys
import time
import math
import logging
import argparse
import re
import signal
import socket
import threading
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from logging.handlers import RotatingFileHandler
from pathlib import Path
from dataclasses import dataclass, field
import psutil
import yaml


# Configuration
VERSION = '1.0.0'
CONFIG_FILE = Path('/etc/process-reaper/config.yaml')
DEFAULT_GRACE_PERIOD = 2.0
SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)
MAX_BYTES = 2 ** 64 - 1

DEFAULT_CONFIG = {
    'process_name': None,
    'memory_limit': None,
    'syslog': False,
    'systemd_notify': False,
    'grace_period_seconds': DEFAULT_GRACE_PERIOD,
    'sample_interval_seconds': 0,
    'log_level': 'INFO',
    'log_file': None,
    'log_max_bytes': 10485760,
    'log_backup_count': 5,
    'dry_run': False
}

# Decimal units are powers of 1000, the "i" variants powers of 1024
SIZE_PREFIXES = ['', 'k', 'm', 'g', 't', 'p', 'e']
BINARY_UNITS = ['B', 'KiB', 'MiB', 'GiB', 'TiB', 'PiB', 'EiB']
SIZE_RE = re.compile(
    r'^\s*(?P<number>\d+(?:\.\d*)?|\.\d+)\s*(?P<prefix>[kmgtpe]?)(?P<binary>i?)b?\s*$',
    re.IGNORECASE
)

logger = logging.getLogger('process-reaper')


class ReaperError(Exception):
    """Base class for errors raised by the reaper."""


class InvalidThreshold(ReaperError):
    """The memory limit expression could not be turned into a byte count."""


class ConfigError(ReaperError):
    """Invalid or unreadable configuration."""


class SamplerError(ReaperError):
    """The process table could not be queried."""


class NotifyError(ReaperError):
    """A systemd notification could not be delivered."""


@dataclass(frozen=True)
class ProcessObservation:
    pid: int
    name: str
    rss: int
    create_time: float = 0.0


@dataclass(frozen=True)
class PendingEscalation:
    """A process that was sent SIGTERM in the current iteration."""
    pid: int
    name: str
    create_time: float = 0.0

    @classmethod
    def from_observation(cls, observation):
        return cls(pid=observation.pid, name=observation.name,
                   create_time=observation.create_time)

    def matches(self, observation):
        """Whether `observation` is still the process that was signalled, not a recycled PID."""
        if observation.pid != self.pid or observation.name != self.name:
            return False
        # create_time of 0.0 means it could not be read
        if self.create_time and observation.create_time:
            return observation.create_time == self.create_time
        return True


@dataclass
class IterationResult:
    number: int
    observed: int = 0
    over: list = field(default_factory=list)
    terminated: list = field(default_factory=list)
    killed: list = field(default_factory=list)


@dataclass(frozen=True)
class SignalResult:
    """Outcome of one signal delivery.

    Truthy when the signal was delivered or the target no longer exists;
    `gone` marks the latter, `error` holds the reason delivery failed.
    """
    delivered: bool
    error: str = None
    gone: bool = False

    def __bool__(self):
        return self.delivered


def setup_argparse(argv=None):
    """Setup command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog='process-reaper',
        description='Process Reaper - watches the memory usage of every process with a '
                    'given name and terminates any instance that exceeds the limit.',
        epilog='Memory limits are absolute sizes (500MiB, 2GB, 1048576) or a percentage '
               'of total memory (25%%).',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {VERSION}'
    )

    parser.add_argument(
        '-p', '--process-name',
        metavar='NAME',
        help='Name of process(es) to monitor (exact match)'
    )

    parser.add_argument(
        '-m', '--memory-limit',
        metavar='LIMIT',
        help='Memory limit; if reached, the offending process will be killed'
    )

    parser.add_argument(
        '--config',
        metavar='PATH',
        type=str,
        help=f'Path to configuration file (default: {CONFIG_FILE}, if present)'
    )

    parser.add_argument(
        '--syslog',
        action='store_true',
        default=None,
        help='Log with syslog priority prefixes for journald instead of timestamps'
    )

    parser.add_argument(
        '--systemd-notify',
        action='store_true',
        default=None,
        help='Notify systemd of readiness and pet its watchdog every loop'
    )

    parser.add_argument(
        '--grace-period',
        metavar='SECONDS',
        type=float,
        help=f'Time between SIGTERM and SIGKILL (default: {DEFAULT_GRACE_PERIOD})'
    )

    parser.add_argument(
        '--interval',
        metavar='SECONDS',
        type=float,
        help='Extra pause between loops on top of the grace period (default: 0)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (overrides config)'
    )

    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Also write a rotating log file at PATH'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        default=None,
        help='Test mode - log actions without actually signalling processes'
    )

    parser.add_argument(
        '--check',
        action='store_true',
        help='Show matching processes and the resolved limit, then exit without taking action'
    )

    return parser.parse_args(argv)


def load_config(config_path=None):
    """Load configuration from YAML file, layered over the defaults."""
    config = dict(DEFAULT_CONFIG)
    path = Path(config_path) if config_path else CONFIG_FILE

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        if config_path:
            raise ConfigError(f"Config file not found: {path}")
        return config
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading config from {path}: {e}") from e

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    unknown = sorted(str(key) for key in set(data) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    config.update(data)
    return config


def apply_cli_overrides(config, args):
    """Copy every option given on the command line over the config values."""
    overrides = {
        'process_name': args.process_name,
        'memory_limit': args.memory_limit,
        'syslog': args.syslog,
        'systemd_notify': args.systemd_notify,
        'grace_period_seconds': args.grace_period,
        'sample_interval_seconds': args.interval,
        'log_level': args.log_level,
        'log_file': args.log_file,
        'dry_run': args.dry_run
    }
    for key, value in overrides.items():
        if value is not None:
            config[key] = value
    return config


def validate_config(config):
    """Check the merged configuration; raise ConfigError on the first problem."""
    if not config.get('process_name'):
        raise ConfigError("A process name is required (--process-name or process_name)")
    if config.get('memory_limit') in (None, ''):
        raise ConfigError("A memory limit is required (--memory-limit or memory_limit)")

    config['process_name'] = str(config['process_name'])
    # YAML reads a bare `memory_limit: 1048576` as an int
    config['memory_limit'] = str(config['memory_limit'])

    for key in ('grace_period_seconds', 'sample_interval_seconds'):
        value = config.get(key)
        if (isinstance(value, bool) or not isinstance(value, (int, float))
                or not math.isfinite(value) or value < 0):
            raise ConfigError(f"{key} must be a non-negative number, got {value!r}")

    for key in ('syslog', 'systemd_notify', 'dry_run'):
        if not isinstance(config.get(key), bool):
            raise ConfigError(f"{key} must be true or false, got {config.get(key)!r}")

    level = str(config.get('log_level', 'INFO')).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level: {config.get('log_level')}")
    config['log_level'] = level

    return config


class JournalFormatter(logging.Formatter):
    """Prefix each record with its sd-daemon priority so journald can assign the level."""

    PRIORITIES = {
        logging.CRITICAL: 2,
        logging.ERROR: 3,
        logging.WARNING: 4,
        logging.INFO: 6,
        logging.DEBUG: 7
    }

    def format(self, record):
        priority = self.PRIORITIES.get(record.levelno, 6)
        return f"<{priority}>{super().format(record)}"


def setup_logging(config):
    """Setup console logging, with journald priorities or an optional rotating file."""
    logger.setLevel(getattr(logging, config.get('log_level', 'INFO')))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    if config.get('syslog'):
        console_handler.setFormatter(JournalFormatter('%(message)s'))
    else:
        console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler with rotation
    log_file = config.get('log_file')
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=config.get('log_max_bytes', 10485760),
            backupCount=config.get('log_backup_count', 5)
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def parse_size(text):
    """Parse a human-readable byte size such as '500MiB', '1.5 GB' or '4096'."""
    match = SIZE_RE.match(str(text))
    if not match:
        raise InvalidThreshold(f"Invalid memory size: {text!r}")

    prefix = match.group('prefix').lower()
    binary = bool(match.group('binary'))
    if binary and not prefix:
        raise InvalidThreshold(f"Invalid memory size: {text!r}")

    base = 1024 if binary else 1000
    multiplier = base ** SIZE_PREFIXES.index(prefix)
    try:
        num_bytes = int((Decimal(match.group('number')) * multiplier).quantize(
            Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation as e:
        raise InvalidThreshold(f"Memory size out of range: {text!r}") from e

    if num_bytes > MAX_BYTES:
        raise InvalidThreshold(f"Memory size out of range: {text!r}")
    return num_bytes


def resolve_threshold(expression, total_memory_bytes):
    """Turn a memory limit expression into an absolute byte threshold.

    `expression` is either a byte size accepted by `parse_size`, or a
    percentage of `total_memory_bytes` such as '50%'. Percentages must lie
    in [0, 100): a limit of the whole machine could never be reached and is
    rejected rather than silently accepted.
    """
    expression = str(expression).strip()

    if not expression.endswith('%'):
        return parse_size(expression)

    try:
        percent = float(expression[:-1])
    except ValueError as e:
        raise InvalidThreshold(f"Invalid memory percentage: {expression!r}") from e

    if not math.isfinite(percent):
        raise InvalidThreshold(f"Invalid memory percentage: {expression!r}")

    ratio = percent / 100.0
    if ratio >= 1.0:
        raise InvalidThreshold(f"Memory percentage >= 100%: {expression!r}")
    if ratio < 0:
        raise InvalidThreshold(f"Memory percentage is negative: {expression!r}")

    return int(math.floor(total_memory_bytes * ratio + 0.5))


def format_size(num_bytes):
    """Format a byte count in the largest binary unit that keeps it >= 1."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    exponent = 0
    while exponent < len(BINARY_UNITS) - 1 and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    return f"{num_bytes / 1024 ** exponent:.2f} {BINARY_UNITS[exponent]}"


class ProcessSampler:
    """Process table access through psutil: enumeration, lookup and signals."""

    ATTRS = ['pid', 'name', 'memory_info', 'create_time', 'status']

    def total_memory(self):
        return psutil.virtual_memory().total

    def sample(self, name):
        """Return an observation for every live process called exactly `name`."""
        observations = []
        try:
            for proc in psutil.process_iter(self.ATTRS):
                info = proc.info

                if info['name'] != name:
                    continue

                # Skip zombie processes
                if info['status'] == psutil.STATUS_ZOMBIE:
                    continue

                # memory_info is None when access was denied
                if info['memory_info'] is None:
                    logger.debug(f"Cannot read memory usage of {name} ({info['pid']}); skipping")
                    continue

                observations.append(ProcessObservation(
                    pid=info['pid'],
                    name=info['name'],
                    rss=info['memory_info'].rss,
                    create_time=info['create_time'] or 0.0
                ))
        except (psutil.Error, OSError) as e:
            raise SamplerError(f"Failed to enumerate processes: {e}") from e

        return observations

    def lookup(self, pid):
        """Return a fresh observation of `pid`, or None if it no longer runs.

        Attributes that cannot be read are left empty; a process that exists
        but denies inspection is neither absent nor a sampler failure.
        """
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                if self._read(proc, 'status') == psutil.STATUS_ZOMBIE:
                    return None
                memory = self._read(proc, 'memory_info')
                return ProcessObservation(
                    pid=proc.pid,
                    name=self._read(proc, 'name'),
                    rss=memory.rss if memory else 0,
                    create_time=self._read(proc, 'create_time') or 0.0
                )
        except psutil.NoSuchProcess:
            return None

    @staticmethod
    def _read(proc, attr):
        try:
            return getattr(proc, attr)()
        except psutil.AccessDenied:
            return None

    def terminate(self, pid, create_time=None):
        """Send SIGTERM to `pid`, provided it still started at `create_time`."""
        return self._send(pid, 'terminate', create_time)

    def kill(self, pid, create_time=None):
        """Send SIGKILL to `pid`, provided it still started at `create_time`."""
        return self._send(pid, 'kill', create_time)

    def _send(self, pid, method, create_time=None):
        try:
            proc = psutil.Process(pid)
            if create_time and proc.create_time() != create_time:
                logger.debug(f"PID {pid} now belongs to another process; not signalling it")
                return SignalResult(delivered=True, gone=True)
            getattr(proc, method)()
        except psutil.NoSuchProcess:
            logger.debug(f"PID {pid} exited before it could be signalled")
            return SignalResult(delivered=True, gone=True)
        except (psutil.AccessDenied, OSError) as e:
            return SignalResult(delivered=False, error=str(e) or type(e).__name__)
        return SignalResult(delivered=True)


class RunState:
    """Run flag shared by the monitor loop and the shutdown signal handler.

    Starts out running and flips to stopped exactly once; there is no way
    back. The loop only reads it between iterations.
    """

    def __init__(self):
        self._stopped = threading.Event()
        self.stop_signal = None

    @property
    def running(self):
        return not self._stopped.is_set()

    def request_stop(self, signum=None):
        """Stop the loop after its current iteration. Returns True only for the first request."""
        if self._stopped.is_set():
            return False
        self.stop_signal = signum
        self._stopped.set()
        return True


def install_shutdown_handlers(run_state, signals=SHUTDOWN_SIGNALS):
    """Route termination signals to `run_state`. Returns the installed handler."""

    def handle_signal(signum, frame):
        signame = signal.Signals(signum).name
        if run_state.request_stop(signum):
            logger.warning(f"Received signal {signame}; stopping after the current loop")
        else:
            logger.debug(f"Received signal {signame} while already stopping; ignoring")

    for signum in signals:
        signal.signal(signum, handle_signal)

    return handle_signal


class WatchdogNotifier:
    """Minimal sd_notify client for systemd Type=notify services.

    Datagrams go to $NOTIFY_SOCKET, which is either a filesystem path or an
    abstract socket name starting with '@'. When the variable is unset no
    service manager is listening and notifications are skipped.
    """

    def __init__(self, enabled=False, socket_path=None):
        self.enabled = enabled
        if socket_path is None:
            socket_path = os.environ.get('NOTIFY_SOCKET')
        self.socket_path = socket_path
        self._warned_unset = False

    def _address(self):
        if self.socket_path.startswith('@'):
            return '\0' + self.socket_path[1:]
        return self.socket_path

    def send(self, *states):
        """Send one notification datagram; True if it was written to the socket."""
        if not self.enabled:
            return False

        if not self.socket_path:
            if not self._warned_unset:
                logger.warning("NOTIFY_SOCKET is not set; systemd notifications are disabled")
                self._warned_unset = True
            return False

        payload = '\n'.join(states).encode('utf-8')
        with socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM) as sock:
            sock.connect(self._address())
            sock.sendall(payload)
        return True

    def notify_ready(self, status):
        logger.debug("Notifying systemd that daemon is ready")
        try:
            return self.send('READY=1', f'STATUS={status}')
        except OSError as e:
            logger.warning(f"Failed to notify systemd of readiness: {e}")
            return False

    def notify_alive(self):
        logger.debug("Petting systemd watchdog")
        try:
            return self.send('WATCHDOG=1')
        except OSError as e:
            raise NotifyError(f"Failed to pet systemd watchdog: {e}") from e

    def notify_stopping(self):
        try:
            return self.send('STOPPING=1')
        except OSError as e:
            logger.warning(f"Failed to notify systemd of shutdown: {e}")
            return False


def classify(observations, threshold):
    """Split observations into (over, under); reaching the threshold counts as over."""
    over = [obs for obs in observations if obs.rss >= threshold]
    under = [obs for obs in observations if obs.rss < threshold]
    return over, under


class Reaper:
    """Two-phase termination: SIGTERM now, SIGKILL for whatever survives."""

    def __init__(self, sampler, dry_run=False):
        self.sampler = sampler
        self.dry_run = dry_run

    def escalate(self, over, threshold_text=''):
        """Send SIGTERM to each process and return what is pending reconciliation."""
        pending = []
        for obs in over:
            logger.warning(f"{obs.name} ({obs.pid}) memory usage of {format_size(obs.rss)} "
                           f"reached threshold of {threshold_text}; terminating")

            if self.dry_run:
                logger.info(f"DRY RUN MODE - Would send SIGTERM to {obs.name} ({obs.pid})")
                continue

            result = self.sampler.terminate(obs.pid, create_time=obs.create_time)
            if not result:
                logger.error(f"Failed to send SIGTERM to {obs.name} ({obs.pid}): {result.error}")

            # Pending even when delivery failed: SIGKILL is the fallback
            pending.append(PendingEscalation.from_observation(obs))

        return pending

    def reconcile(self, pending):
        """SIGKILL every pending process still alive. Returns the PIDs SIGKILL reached."""
        killed = []
        for record in pending:
            current = self.sampler.lookup(record.pid)

            if current is None:
                logger.debug(f"Could not find {record.name} ({record.pid}) again; "
                             f"assuming successful termination")
                continue

            if current.name is None:
                logger.warning(f"PID {record.pid} can no longer be inspected; "
                               f"leaving it alone")
                continue

            if not record.matches(current):
                logger.warning(f"PID {record.pid} now belongs to {current.name}, not the "
                               f"terminated {record.name}; leaving it alone")
                continue

            logger.warning(f"Terminated process, {record.name} ({record.pid}), still alive; killing")
            result = self.sampler.kill(record.pid, create_time=record.create_time)
            if not result:
                logger.error(f"Failed to send SIGKILL to {record.name} ({record.pid}): {result.error}")
            elif not result.gone:
                killed.append(record.pid)

        return killed


class MonitorLoop:
    """Sample, escalate, wait, reconcile and notify until asked to stop."""

    def __init__(self, process_name, threshold, sampler, run_state, notifier=None,
                 grace_period=DEFAULT_GRACE_PERIOD, sample_interval=0.0, dry_run=False,
                 threshold_text=None, sleep=time.sleep):
        self.process_name = process_name
        self.threshold = threshold
        self.threshold_text = threshold_text or format_size(threshold)
        self.sampler = sampler
        self.run_state = run_state
        self.notifier = notifier or WatchdogNotifier(enabled=False)
        self.grace_period = grace_period
        self.sample_interval = sample_interval
        self.reaper = Reaper(sampler, dry_run=dry_run)
        self.sleep = sleep
        self.iterations = 0

    def run_once(self):
        """Run one full iteration and return what happened in it."""
        result = IterationResult(number=self.iterations)
        logger.debug(f"Starting loop #{self.iterations}")
        self.iterations += 1

        observations = self.sampler.sample(self.process_name)
        result.observed = len(observations)

        over, under = classify(observations, self.threshold)
        for obs in under:
            logger.debug(f"{obs.name} ({obs.pid}) using {format_size(obs.rss)} of memory")
        result.over = [obs.pid for obs in over]

        pending = self.reaper.escalate(over, self.threshold_text)
        result.terminated = [record.pid for record in pending]

        # Not interruptible; a stop request is seen once this iteration ends
        logger.debug(f"Sleeping for {self.grace_period} seconds")
        self.sleep(self.grace_period)

        result.killed = self.reaper.reconcile(pending)

        self.notifier.notify_alive()

        if self.sample_interval > 0:
            self.sleep(self.sample_interval)

        return result

    def run(self):
        """Loop until the run state is stopped. Returns the number of iterations run."""
        while self.run_state.running:
            self.run_once()
        logger.info(f"Stopping after {self.iterations} loop(s)")
        return self.iterations


def check_mode(config, sampler):
    """Show matching processes against the limit without taking action."""
    name = config['process_name']
    total = sampler.total_memory()
    threshold = resolve_threshold(config['memory_limit'], total)

    print("="*60)
    print("PROCESS MEMORY CHECK")
    print("="*60)
    print(f"\nTarget process:  {name}")
    print(f"Memory limit:    {config['memory_limit']} ({format_size(threshold)} "
          f"of {format_size(total)} total)")

    observations = sampler.sample(name)
    if not observations:
        print(f"\nNo processes named {name} are running.")
        print("="*60)
        return 0

    over, _ = classify(observations, threshold)
    over_pids = {obs.pid for obs in over}

    print(f"\nFound {len(observations)} matching process(es):")
    for obs in sorted(observations, key=lambda o: o.rss, reverse=True):
        marker = "EXCEEDS" if obs.pid in over_pids else "ok"
        print(f"  PID {obs.pid:>7}: {format_size(obs.rss):>12}  {marker}")

    if over:
        print(f"\nSTATUS: {len(over)} process(es) at or above the limit")
        print("        (Reaper would terminate them if running normally)")
    else:
        print("\nSTATUS: All processes below the limit")

    print("="*60)
    return 0


def main(args=None):
    """Main monitoring function. Returns the process exit status."""
    if args is None:
        args = setup_argparse([])

    try:
        config = load_config(args.config)
        apply_cli_overrides(config, args)
        validate_config(config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    sampler = ProcessSampler()

    if args.check:
        try:
            return check_mode(config, sampler)
        except ReaperError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    setup_logging(config)
    logger.info("Initializing")

    run_state = RunState()
    install_shutdown_handlers(run_state)

    try:
        threshold = resolve_threshold(config['memory_limit'], sampler.total_memory())
    except InvalidThreshold as e:
        logger.critical(f"Failed to initialize: {e}")
        return 1

    process_name = config['process_name']
    memory_limit = config['memory_limit']
    logger.info(f"Entering monitoring loop; target process: {process_name} "
                f"(limit {memory_limit} = {threshold} bytes)")
    if config['dry_run']:
        logger.info("DRY RUN MODE - no signals will be sent")

    notifier = WatchdogNotifier(enabled=config['systemd_notify'])
    notifier.notify_ready(f"Monitoring {process_name} (limit {memory_limit})")

    loop = MonitorLoop(
        process_name,
        threshold,
        sampler,
        run_state,
        notifier=notifier,
        grace_period=config['grace_period_seconds'],
        sample_interval=config['sample_interval_seconds'],
        dry_run=config['dry_run'],
        threshold_text=memory_limit
    )

    try:
        loop.run()
    except (SamplerError, NotifyError) as e:
        logger.critical(str(e))
        return 1

    notifier.notify_stopping()
    logger.info("Process Reaper finished")
    return 0


def cli():
    try:
        sys.exit(main(setup_argparse()))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    cli()
