"""xremote server main entry point"""

import argparse
import logging
import threading
from typing import Callable

from xremote import __version__
from xremote.common.config import Config
from xremote.common.types import Screen
from xremote.input.backend import InputInjector
from xremote.server.bootstrap import (
    configWithSettings_load,
    credentialFromConfig_load,
    injectorWithConfig_create,
    loggingWithConfig_setup,
)
from xremote.server.button_loop import ButtonActuator
from xremote.server.dispatcher import CommandChannels, CommandDispatcher, DispatchError
from xremote.server.network import ServerNetwork
from xremote.server.pointer_loop import PointerInterpolator
from xremote.server.server_logging import logging_setup
from xremote.server.supervisor import ConnectionSupervisor

logger = logging.getLogger(__name__)


class WorkerExitedError(RuntimeError):
    """A worker loop stopped while the server was still running"""


def worker_start(
    name: str,
    loop: Callable[[threading.Event], None],
    stop_event: threading.Event,
    on_exit: Callable[[], None],
) -> threading.Thread:
    """
    Run a worker loop on a daemon thread

    Args:
        name: Thread name
        loop: Loop body, given the shared stop event
        stop_event: Event set when the server is shutting down
        on_exit: Called when the loop returns or raises

    Returns:
        Started thread
    """
    def _run() -> None:
        try:
            loop(stop_event)
        except Exception:
            logger.exception(f"{name} crashed")
        finally:
            on_exit()

    thread = threading.Thread(target=_run, name=name, daemon=True)
    thread.start()
    return thread


def workers_create(
    config: Config,
    injector: InputInjector,
    screen: Screen,
    channels: CommandChannels,
) -> tuple[PointerInterpolator, ButtonActuator]:
    """
    Build the pointer and button worker loops

    Args:
        config: Loaded config
        injector: Shared input backend
        screen: Screen geometry for pointer conversion
        channels: Channels fed by the dispatcher

    Returns:
        Pointer interpolator and button actuator
    """
    pointer = PointerInterpolator(
        injector=injector,
        targets=channels.pointer,
        screen=screen,
        step=config.pointer.step,
        tick_interval=config.pointer.tick_ms / 1000.0,
    )
    buttons = ButtonActuator(
        injector=injector,
        keys=channels.keys,
        buttons=channels.buttons,
        specials=channels.specials,
        settle_delay=config.keyboard.settle_ms / 1000.0,
    )
    return pointer, buttons


def server_run(args: argparse.Namespace) -> None:
    """
    Run xremote server until interrupted or a worker loop dies

    Args:
        args: Parsed command line arguments

    Raises:
        DispatchError: If a command could not reach its worker loop
        WorkerExitedError: If a worker loop stopped on its own
    """
    config = configWithSettings_load(args)
    loggingWithConfig_setup(args, config, logging_setup)

    logger.info(f"xremote server v{__version__}")
    logger.info(f"Listening on {config.server.host}:{config.server.port}")
    logger.info(f"Backend: {config.server.backend}, display: {config.server.display or '$DISPLAY'}")

    credential = credentialFromConfig_load(config)
    injector = injectorWithConfig_create(config)
    screen = injector.screenGeometry_get()
    logger.info(f"Screen geometry: {screen.width}x{screen.height}")

    channels = CommandChannels.channels_create()
    pointer, buttons = workers_create(config, injector, screen, channels)
    supervisor = ConnectionSupervisor(
        network=ServerNetwork(host=config.server.host, port=config.server.port),
        credential=credential,
        dispatcher=CommandDispatcher(channels),
        auth_config=config.auth,
    )

    stop_event = threading.Event()
    worker_exited = threading.Event()

    def _worker_exit() -> None:
        if not stop_event.is_set():
            worker_exited.set()
            supervisor.serve_stop()

    threads = [
        worker_start("pointer-loop", pointer.loop_run, stop_event, _worker_exit),
        worker_start("button-loop", buttons.loop_run, stop_event, _worker_exit),
    ]

    try:
        logger.info("Server running. Press Ctrl+C to stop.")
        supervisor.serve_forever()
        if worker_exited.is_set():
            raise WorkerExitedError("Input worker loop exited; stopping server")
    except DispatchError as e:
        logger.critical(f"Worker loop unavailable: {e}")
        raise
    finally:
        stop_event.set()
        channels.all_close()
        supervisor.serve_stop()
        for thread in threads:
            thread.join(timeout=1.0)
        injector.connection_close()
