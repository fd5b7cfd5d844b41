"""Network printer discovery and ESC/POS print dispatch."""
