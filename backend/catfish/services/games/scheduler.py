from catfish import socketio


def make_clock_scheduler(app):
    """Return the hook the coordinator calls whenever its clock starts.

    - No-ops in TESTING mode (tests tick the coordinator by hand)
    - Runs one background loop per clock generation, ticking every
      TICK_INTERVAL_SEC until the coordinator reports the clock stopped
    """
    testing = app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS')

    def schedule(coordinator, generation: int) -> None:
        if testing:
            return
        interval = float(app.config.get('TICK_INTERVAL_SEC', 1))
        heartbeat = int(app.config.get('TIMER_HEARTBEAT_SEC', 0) or 0)
        app.logger.info(f"[timer-set] generation={generation} interval={interval}s")

        def _worker(expected_generation: int):
            ticks = 0
            while True:
                socketio.sleep(interval)
                if not coordinator.tick(expected_generation):
                    app.logger.info(f"[timer-stop] generation={expected_generation} ticks={ticks}")
                    return
                ticks += 1
                if heartbeat > 0 and ticks % heartbeat == 0:
                    snap = coordinator.snapshot()
                    app.logger.info(
                        f"[timer-heartbeat] generation={expected_generation} phase={snap['phase']} "
                        f"round={snap['round']} remaining={snap['time_left']}s"
                    )

        socketio.start_background_task(_worker, generation)

    return schedule
