#!/usr/bin/env python3
"""
Launch Tracker System Runner
Starts Redis (when the Redis store is configured), imports any files given on
the command line and runs the backend with a background import worker.

Usage: run_launch_tracker.py [export.xlsx|export.csv ...]
"""

import sys
import time
import signal
import threading
import subprocess
import queue
from pathlib import Path
from typing import Optional, Dict, Any, List
import logging

# Add scripts directory to path for imports
script_dir = Path(__file__).parent
sys.path.insert(0, str(script_dir))

# Import common utilities
from utils import setup_project_paths, verify_project_structure

# Setup project paths
project_root = setup_project_paths()

# Import global configuration
from global_config import *

from launch_tracker.main import LaunchTrackerBackend
from launch_tracker.config import settings

logger = logging.getLogger(__name__)


def configure_logging():
    """Log to LOG_FILE and stdout"""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(sys.stdout)
        ]
    )


class LaunchTrackerSystemRunner:
    """Coordinates the Redis server, the import worker and the backend"""

    def __init__(self, backend: Optional[LaunchTrackerBackend] = None):
        """Initialize the system runner"""
        self.backend = backend if backend is not None else LaunchTrackerBackend()
        self.redis_process: Optional[subprocess.Popen] = None
        self.running = False
        self.command_queue = queue.Queue()
        self.command_thread: Optional[threading.Thread] = None
        self.status_lock = threading.Lock()

        # Thread-safe status tracking
        self.system_status = {
            'redis_running': False,
            'backend_running': False,
            'imports_done': 0,
            'imports_failed': 0,
        }

        # Set up signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals"""
        logger.info("Received shutdown signal, stopping Launch Tracker...")
        self.stop()
        sys.exit(0)

    def _update_status(self, key: str, value: Any):
        """Thread-safe status update"""
        with self.status_lock:
            self.system_status[key] = value

    def _increment_status(self, key: str):
        with self.status_lock:
            self.system_status[key] += 1

    def _redis_ping(self, timeout: float) -> bool:
        result = subprocess.run(['redis-cli', '-p', str(settings.redis_port), 'ping'],
                                capture_output=True, text=True, timeout=timeout)
        return result.returncode == 0 and 'PONG' in result.stdout

    def start_redis(self) -> bool:
        """Start a Redis server with append-only persistence unless one is running"""
        # Check if Redis is already running
        try:
            if self._redis_ping(timeout=2):
                logger.info("Redis is already running")
                self._update_status('redis_running', True)
                return True
        except (subprocess.TimeoutExpired, FileNotFoundError):
            pass

        data_dir = project_root / REDIS_DATA_DIR
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Starting Redis server...")
            self.redis_process = subprocess.Popen(
                ['redis-server', '--port', str(settings.redis_port),
                 '--dir', str(data_dir), '--appendonly', 'yes'],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True
            )
        except OSError as e:
            logger.error(f"Error starting Redis: {e}")
            return False

        # Wait for Redis to start
        time.sleep(REDIS_STARTUP_WAIT_SECONDS)

        # Verify Redis is running
        try:
            if self._redis_ping(timeout=5):
                logger.info("Redis server started successfully")
                self._update_status('redis_running', True)
                return True
            logger.error("Redis server failed to start")
            return False
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.error(f"Failed to verify Redis: {e}")
            return False

    def stop_redis(self):
        """Stop Redis server"""
        if self.redis_process:
            logger.info("Stopping Redis server...")
            self.redis_process.terminate()
            try:
                self.redis_process.wait(timeout=10)
            except subprocess.TimeoutExpired:
                logger.warning("Redis didn't stop gracefully, forcing...")
                self.redis_process.kill()
            self.redis_process = None
            self._update_status('redis_running', False)

    def import_file(self, path: str) -> bool:
        """Import one export file, counting the outcome"""
        summary = self.backend.import_file(path)
        if summary is None:
            self._increment_status('imports_failed')
            return False
        logger.info(f"Imported {summary.imported} shots from {summary.filename} "
                    f"({summary.duplicates_skipped} duplicates skipped)")
        self._increment_status('imports_done')
        return True

    def load_sample(self) -> bool:
        summary = self.backend.load_sample()
        if summary is None:
            self._increment_status('imports_failed')
            return False
        self._increment_status('imports_done')
        return True

    def command_processor_thread(self):
        """Thread running queued imports off the interactive loop"""
        logger.info("Starting command processor thread...")

        while self.running:
            try:
                command = self.command_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            self._process_command(command)

        logger.info("Command processor thread stopped")

    def _process_command(self, command: Dict[str, Any]):
        """Process a command from the queue"""
        cmd_type = command.get('type')

        if cmd_type == 'import':
            self.import_file(command['path'])
        elif cmd_type == 'sample':
            self.load_sample()
        elif cmd_type == 'get_status':
            self._print_status()
        elif cmd_type == 'get_summary':
            self._print_summary()
        else:
            logger.warning(f"Unknown command type: {cmd_type}")

    def _print_status(self):
        """Print current system status"""
        with self.status_lock:
            status = self.system_status.copy()

        print("\n=== Launch Tracker Status ===")
        print(f"Store: {settings.store_backend}")
        print(f"Redis Server: {'✅ Running' if status['redis_running'] else '❌ Stopped'}")
        print(f"Backend: {'✅ Running' if status['backend_running'] else '❌ Stopped'}")
        print(f"Imports: {status['imports_done']} done, {status['imports_failed']} failed")

        backend_status = self.backend.get_status()
        print(f"Shots: {backend_status['total_shots']} in {backend_status['sessions']} sessions")

    def _print_summary(self):
        """Print a summary of every session"""
        print("\n=== Session Summary ===")
        for session_id in self.backend.session_manager.get_sessions()[1:]:
            summary = self.backend.session_manager.get_session_summary(session_id)
            print(f"{session_id}: {summary['shot_count']} shots, {', '.join(summary['clubs'])}")

    def _print_gaps(self):
        report = self.backend.gaps()
        print("\n=== Gapping ===")
        for gap in report.gaps:
            flag = " TIGHT" if gap.tight else (" WIDE" if gap.wide else "")
            print(f"{gap.longer} -> {gap.shorter}: {gap.gap:.1f} yds{flag}")

    def start(self, files: Optional[List[str]] = None, interactive: bool = True) -> bool:
        """Start the complete Launch Tracker system"""
        logger.info("Starting Launch Tracker system...")

        # 1. Start Redis when the Redis store is configured
        if settings.store_backend.lower() == "redis" and not self.start_redis():
            logger.error("Failed to start Redis. Exiting.")
            return False

        self._update_status('backend_running', True)

        # 2. Import files given on the command line
        for path in files or []:
            self.import_file(path)

        # 3. Start the import worker
        self.running = True
        self.command_thread = threading.Thread(
            target=self.command_processor_thread,
            daemon=True
        )
        self.command_thread.start()

        logger.info("Launch Tracker system started successfully!")
        self._print_status()

        # 4. Start interactive command loop
        if interactive:
            self._interactive_loop()

        return True

    def _interactive_loop(self):
        """Interactive command loop"""
        print("\n=== Launch Tracker Commands ===")
        print("Available commands:")
        print("  import <path>   - Queue an export file for import")
        print("  sample          - Queue the sample session")
        print("  status          - Show system status")
        print("  summary         - Show every session")
        print("  gaps            - Show club gapping")
        print("  quit            - Exit the system")

        while self.running:
            try:
                command = input("\nLaunchTracker> ").strip()
                name = command.split(" ", 1)[0].lower()

                if name == 'quit':
                    break
                elif name == 'import' and " " in command:
                    self.command_queue.put({'type': 'import', 'path': command.split(" ", 1)[1].strip()})
                elif name == 'sample':
                    self.command_queue.put({'type': 'sample'})
                elif name == 'status':
                    self._print_status()
                elif name == 'summary':
                    self._print_summary()
                elif name == 'gaps':
                    self._print_gaps()
                elif command:
                    print(f"Unknown command: {command}")

            except KeyboardInterrupt:
                break
            except EOFError:
                break

    def stop(self):
        """Stop the complete Launch Tracker system"""
        logger.info("Stopping Launch Tracker system...")

        self.running = False
        if self.command_thread is not None:
            self.command_thread.join(timeout=WORKER_JOIN_TIMEOUT_SECONDS)
            self.command_thread = None
        self.backend.stop()
        self._update_status('backend_running', False)

        # Stop Redis
        self.stop_redis()

        logger.info("Launch Tracker system stopped")


def main():
    """Main entry point"""
    configure_logging()
    print("⛳ Launch Tracker System Runner")
    print("=" * 50)

    # Verify project structure
    if not verify_project_structure(project_root):
        print("Error: Invalid project structure")
        sys.exit(1)

    runner = LaunchTrackerSystemRunner()

    try:
        if not runner.start(sys.argv[1:]):
            print("Failed to start Launch Tracker")
            sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
    finally:
        runner.stop()


if __name__ == "__main__":
    main()
