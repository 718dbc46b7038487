"""Human (Rich) and machine (JSON) rendering of ServiceResult."""
