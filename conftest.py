pytest_plugins = ["dual_pom.pytest_plugin"]
