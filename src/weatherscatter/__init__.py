"""Interactive scatter plot of daily temperature records with marginal densities."""
