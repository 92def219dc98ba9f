from hud.main import run

run()
