"""Restaurant back-office: employees, tasks, orders, supplies and clients."""
