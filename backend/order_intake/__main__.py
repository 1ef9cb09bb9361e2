from order_intake.main import run

run()
