from vtkdiff.cli import main

main()
