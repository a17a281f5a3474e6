"""Dashboard insights and side-by-side comparison over stored simulation results."""
