from recall_agent.clients.server import run

if __name__ == "__main__":
    run()
