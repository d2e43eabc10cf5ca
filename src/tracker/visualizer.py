import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns


def group_size_plot(groups_df, output_path, highlight=None, show=False, title='Binder neighbor group sizes'):
    sns.set_theme()
    highlight = set(highlight or ())

    df = groups_df.reset_index().sort_values('size', ascending=False)
    df['pid'] = df['pid'].astype(str)
    df['group'] = ['related' if int(pid) in highlight else 'other' for pid in df['pid']]

    plt.figure(figsize=(12, 6))
    sns.barplot(x='pid', y='size', hue='group', data=df, dodge=False,
                palette={'related': 'tab:red', 'other': 'tab:blue'})

    plt.xlabel('PID')
    plt.ylabel('Group size')
    plt.title(title)
    plt.xticks(rotation=90)
    plt.tight_layout()

    if show:
        plt.show()
    plt.savefig(output_path)
    plt.close()
