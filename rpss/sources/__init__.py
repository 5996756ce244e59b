"""Results sources that produce finals scoresheets."""
