import matplotlib

# Tests never open a window
matplotlib.use("Agg")
